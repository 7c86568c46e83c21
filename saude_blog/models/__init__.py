"""Model exports used by metadata discovery."""

from saude_blog.models.admin_user import AdminUser
from saude_blog.models.post import Post

__all__ = ["AdminUser", "Post"]
