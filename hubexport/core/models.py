"""
Pydantic models for hubexport
Typed views over the management API records and the exported document
"""

from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field, ConfigDict

ACTIVE_CONTENT_WEBHOOK = "active-content-webhook"
ARCHIVED_CONTENT_WEBHOOK = "archived-content-webhook"


class Hub(BaseModel):
    """Tenant scope of an export"""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str


class IndexSummary(BaseModel):
    """One entry of the index listing; ``raw`` is exported as-is"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "IndexSummary":
        return cls(
            id=record["id"],
            name=record.get("name", ""),
            parent_id=record.get("parentId"),
            raw=dict(record),
        )

    @property
    def is_replica(self) -> bool:
        return bool(self.parent_id)

    def details(self) -> Dict[str, Any]:
        """The listing record as received (or rebuilt from fields when constructed directly)."""
        if self.raw:
            return dict(self.raw)
        return self.model_dump(by_alias=True, exclude_none=True)


class ContentTypeAssignment(BaseModel):
    """Association between an index and a content type, with its webhook links"""
    model_config = ConfigDict(populate_by_name=True)

    content_type_uri: Optional[str] = Field(default=None, alias="contentTypeUri")
    links: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="_links")
    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "ContentTypeAssignment":
        return cls(
            content_type_uri=record.get("contentTypeUri"),
            links=record.get("_links") or {},
            raw=dict(record),
        )

    def webhook_id(self, relation: str) -> Optional[str]:
        """Id of the webhook behind a link relation: the last segment of its href."""
        href = (self.links.get(relation) or {}).get("href")
        if not href:
            return None
        return href.rstrip("/").split("/")[-1]

    def record(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return self.model_dump(by_alias=True, exclude_none=True)


class ReplicaSettingsEntry(BaseModel):
    """Settings of one replica, keyed by the name its primary declares"""
    id: str
    name: str
    settings: Dict[str, Any]


class IndexEntry(BaseModel):
    """Exported record for one top-level index"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    index_details: Dict[str, Any] = Field(alias="indexDetails")
    settings: Dict[str, Any]
    replicas_settings: List[ReplicaSettingsEntry] = Field(default_factory=list, alias="replicasSettings")
    active_content_webhook: Optional[Any] = Field(default=None, alias="activeContentWebhook")
    archived_content_webhook: Optional[Any] = Field(default=None, alias="archivedContentWebhook")

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict; webhook fields stay present when null."""
        return self.model_dump(mode="json", by_alias=True)
