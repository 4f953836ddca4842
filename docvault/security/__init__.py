"""DocVault Security — user directory consulted by ACL projections."""

from docvault.security.directory import StaticUserDirectory, User, UserDirectory

__all__ = ["StaticUserDirectory", "User", "UserDirectory"]
