"""Recoverable ECDSA signature as used in Hyperliquid requests."""

from dataclasses import dataclass

from hexbytes import HexBytes


@dataclass(slots=True, frozen=True)
class Signature:
    """Signature split into its components.

    - Sent to the exchange as ``{"r": "0x..", "s": "0x..", "v": 27}``

    - The textual form is the usual 65 byte Ethereum signature ``0x{r}{s}{v}``
    """

    #: 256-bit integer
    r: int

    #: 256-bit integer
    s: int

    #: Recovery id, 27 or 28
    v: int

    def __post_init__(self):
        assert 0 <= self.r < 2**256, f"r out of range: {self.r}"
        assert 0 <= self.s < 2**256, f"s out of range: {self.s}"
        assert self.v in (27, 28), f"v must be 27 or 28, got {self.v}"

    def __repr__(self):
        return f"<Signature r:{hex(self.r)} s:{hex(self.s)} v:{self.v}>"

    def to_bytes(self) -> HexBytes:
        return HexBytes(self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v]))

    def to_hex(self) -> str:
        """Format as ``0x`` + 64 hex chars r + 64 hex chars s + 2 hex chars v."""
        return f"0x{self.r:064x}{self.s:064x}{self.v:02x}"

    def to_wire(self) -> dict:
        """JSON and MessagePack form.

        ``r`` and ``s`` are minimal hex strings without zero padding.
        """
        return {"r": hex(self.r), "s": hex(self.s), "v": self.v}

    @staticmethod
    def from_hex(value: str) -> "Signature":
        """Parse 130 hex characters, with or without ``0x`` prefix.

        :raise ValueError:
            Wrong length or not hex.
        """
        hex_str = value[2:] if value.startswith("0x") else value
        if len(hex_str) != 130:
            raise ValueError(f"Invalid signature length: expected 130 hex characters (65 bytes), got {len(hex_str)}")
        v = int(hex_str[128:130], 16)
        if v not in (27, 28):
            raise ValueError(f"Invalid signature recovery id: {v}")
        return Signature(
            r=int(hex_str[0:64], 16),
            s=int(hex_str[64:128], 16),
            v=v,
        )

    @staticmethod
    def from_wire(data: dict) -> "Signature":
        return Signature(r=int(data["r"], 16), s=int(data["s"], 16), v=int(data["v"]))
