from .member import Member  # noqa: F401
from .audit_log import AuditLog  # noqa: F401
