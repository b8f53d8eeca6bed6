from .codec import Codec, CodecRegistry
from .errors import ConstructionFailure, MalformedPayload, SimpleBankError
from .mapper import Mapper
from .provider import MapperProvider, SimpleBankMapperProvider, default_registry

__version__ = '0.1.0'

__all__ = [
    'Codec',
    'CodecRegistry',
    'ConstructionFailure',
    'MalformedPayload',
    'Mapper',
    'MapperProvider',
    'SimpleBankError',
    'SimpleBankMapperProvider',
    'default_registry',
]
