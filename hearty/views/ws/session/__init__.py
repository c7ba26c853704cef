from .connect import register as register_connect
from .disconnect import register as register_disconnect
from .logout import register as register_logout

__all__ = ["register_connect", "register_disconnect", "register_logout"]
