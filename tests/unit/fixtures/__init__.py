from .main import *  # noqa: F401, F403
from .transport import *  # noqa: F401, F403
