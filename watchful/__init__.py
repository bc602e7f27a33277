from importlib.metadata import version

from . import dict_proxy, list_proxy, object_proxy  # noqa: F401
from .descriptors import Descriptor, define_property, get_own_property_descriptor
from .eventful import Eventful, ListenerWarning
from .events import DefineEvent, DeleteEvent, SetEvent
from .object_utils import same_value
from .proxy import Proxy, Ref, observable, to_raw

__version__ = version("watchful")
