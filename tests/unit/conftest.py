from .fixtures import *  # noqa
