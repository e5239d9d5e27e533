"""
Data models for extracted register data.

These dataclasses represent the typed intermediate values produced by the
field parser. Records handed to callers are plain dicts built with to_dict().
"""

from dataclasses import dataclass, field
from urllib.parse import parse_qs

from orsr_parser.constants import COURT_IDS, DETAIL_PATH
from orsr_parser.exceptions import InvalidIdentifierError


@dataclass
class AddressParts:
    """Address split from a single free-text line."""

    street: str = ""
    number: str = ""
    city: str = ""
    zip: str = ""
    country: str | None = None
    district: str | None = None

    def is_empty(self) -> bool:
        return not (self.street or self.number or self.city or self.zip)

    def to_dict(self) -> dict:
        out = {
            "street": self.street,
            "number": self.number,
            "city": self.city,
            "zip": self.zip,
        }
        if self.country:
            out["country"] = self.country
        if self.district:
            out["district"] = self.district
        return out


@dataclass
class PersonRecord:
    """Officer, partner, liquidator or supervisory board member."""

    name: str
    function: str = ""
    address: AddressParts = field(default_factory=AddressParts)
    since: str = ""
    until: str = ""

    def to_dict(self) -> dict:
        # Flat, alphabetically ordered keys
        out = {"name": self.name, "function": self.function}
        out.update(self.address.to_dict())
        out["since"] = self.since
        out["until"] = self.until
        return dict(sorted(out.items()))


@dataclass
class MonetaryAmount:
    """Amount in EUR; legacy SKK amounts keep their source text in `original`."""

    amount: float
    currency: str
    original: str | None = None

    def to_dict(self) -> dict:
        out = {"amount": self.amount, "currency": self.currency}
        if self.original:
            out["original"] = self.original
        return out


@dataclass(frozen=True)
class DetailId:
    """
    Lookup key of an entity detail page.

    Attributes:
        id: Numeric entity identifier
        sid: Court identifier (0 = any court)
        full: True for the full historical extract, False for the current one
    """

    id: int
    sid: int
    full: bool = False

    def __post_init__(self):
        if not isinstance(self.id, int) or self.id < 1:
            raise InvalidIdentifierError(f"Invalid entity ID [{self.id}].")
        if self.sid not in COURT_IDS:
            raise InvalidIdentifierError(f"Invalid court ID [{self.sid}].")

    @property
    def cache_key(self) -> str:
        return f"{self.id}-{self.sid}-{int(self.full)}"

    def to_link(self) -> str:
        return f"{DETAIL_PATH}?ID={self.id}&SID={self.sid}&P={int(self.full)}"

    @classmethod
    def from_values(cls, id, sid, full=False) -> "DetailId":
        """Build from loosely typed values (strings from links or CLI)."""
        try:
            entity_id = int(str(id).strip())
            court_id = int(str(sid).strip())
            variant = bool(int(full.strip())) if isinstance(full, str) else bool(full)
        except (TypeError, ValueError) as e:
            raise InvalidIdentifierError(f"Invalid detail identifier [{id}, {sid}, {full}].") from e
        return cls(entity_id, court_id, variant)

    @classmethod
    def from_link(cls, link: str, full: bool | None = None) -> "DetailId | None":
        """
        Parse a partial link such as "vypis.asp?ID=54190&SID=7&P=0".

        Args:
            link: Link found in search results
            full: Override the extract variant (None = keep the link's P value)

        Returns:
            DetailId, or None if the link is not a detail link
        """
        if not link or f"{DETAIL_PATH}?" not in link:
            return None
        query = link.split("asp?", 1)[1]
        params = {key: values[0] for key, values in parse_qs(query).items()}
        if not {"ID", "SID", "P"} <= params.keys():
            return None
        variant = params["P"] if full is None else full
        return cls.from_values(params["ID"], params["SID"], variant)
