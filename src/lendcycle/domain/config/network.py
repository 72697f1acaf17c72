"""Network configuration model."""

from pydantic import BaseModel, Field


class NetworkConfig(BaseModel):
    """Configuration for the RPC endpoint.

    Attributes:
        rpc_url: JSON-RPC endpoint
        explorer_url: Prefix for transaction links in logs
        request_timeout: HTTP timeout for RPC calls in seconds
        receipt_timeout: How long to wait for a transaction to be mined in seconds
    """

    rpc_url: str = "https://rpc.soniclabs.com"
    explorer_url: str = "https://sonicscan.org/tx/"
    request_timeout: float = Field(30.0, gt=0)
    receipt_timeout: float = Field(180.0, gt=0)
