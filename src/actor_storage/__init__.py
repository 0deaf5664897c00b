"""Actor state storage core: payload codec, document addressing, table provisioning.

Store-agnostic; talks to the store only through DocumentStorePort.
"""

from src.actor_storage.addressing import (
    DOCUMENT_ID_DECORATION_SEPARATOR,
    DocumentAddresser,
    StateTypeOptions,
    StateTypeRegistry,
    default_registry,
    register_state_type,
)
from src.actor_storage.codec import (
    EMPTY_BYTES_PLACEHOLDER,
    EMPTY_STRING_PLACEHOLDER,
    PayloadCodec,
)
from src.actor_storage.provisioning import ProvisioningPolicy, TableCache, TableProvisioner

__all__ = [
    "DOCUMENT_ID_DECORATION_SEPARATOR",
    "EMPTY_BYTES_PLACEHOLDER",
    "EMPTY_STRING_PLACEHOLDER",
    "DocumentAddresser",
    "PayloadCodec",
    "ProvisioningPolicy",
    "StateTypeOptions",
    "StateTypeRegistry",
    "TableCache",
    "TableProvisioner",
    "default_registry",
    "register_state_type",
]
