from .configure import *  # noqa
from .components import *  # noqa
from .servicemesh import *  # noqa
from .watchers import *  # noqa
from .mutation import *  # noqa
from .validation import *  # noqa
