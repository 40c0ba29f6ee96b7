"""Host-system operations: package manager, privileged writes, launcher trust."""

from cursor_installer.gateway.system.abc import System as System
from cursor_installer.gateway.system.fake import FakeSystem as FakeSystem
from cursor_installer.gateway.system.real import RealSystem as RealSystem
