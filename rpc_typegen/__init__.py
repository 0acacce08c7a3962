"""rpc-typegen: TypeScript bindings for RPC procedures and serializable types."""

__version__ = "0.1.0"
