"""Pydantic schemas for the InsightBoard client.

Defines the typed table consumed by the chart builder, the chart-ready
series it produces, the session identity and the request/response shapes
exchanged with the file and insight gateway. Gateway payloads use camelCase
keys; every model here accepts both the wire alias and the field name.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ColumnType(str, Enum):
    """Column types assigned by the upstream file parser."""

    NUMBER = "number"
    STRING = "string"
    DATE = "date"


class ChartKind(str, Enum):
    """Chart kinds derived from a table."""

    BAR = "bar"
    PIE = "pie"
    LINE = "line"


class ApiModel(BaseModel):
    """Base for gateway payloads keyed in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Column(BaseModel):
    """A named, typed attribute of a dataset."""

    name: str = Field(description="Column header as it appears in the file")
    type: ColumnType = Field(description="Inferred column type")

    model_config = ConfigDict(frozen=True)


class Table(BaseModel):
    """Full dataset: ordered rows plus the column schema.

    Every row carries a key for every declared column; absent values are
    filled with ``None`` on construction.
    """

    rows: List[Dict[str, Any]] = Field(default_factory=list, description="Observations in file order")
    columns: List[Column] = Field(default_factory=list, description="Ordered column schema")

    @model_validator(mode="after")
    def _fill_missing_values(self) -> "Table":
        for row in self.rows:
            for column in self.columns:
                row.setdefault(column.name, None)
        return self

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def is_empty(self) -> bool:
        return not self.rows


class ChartPoint(BaseModel):
    """A single (category, measurement) pair."""

    name: str
    value: float

    model_config = ConfigDict(frozen=True)


class ChartData(BaseModel):
    """The three chart-ready series built from one table."""

    bar: List[ChartPoint] = Field(default_factory=list)
    pie: List[ChartPoint] = Field(default_factory=list)
    line: List[ChartPoint] = Field(default_factory=list)

    def series(self, kind: ChartKind) -> List[ChartPoint]:
        return getattr(self, ChartKind(kind).value)

    def has_data(self, kind: ChartKind) -> bool:
        """Return True when the series for *kind* has at least one point."""
        return bool(self.series(kind))

    def default_kind(self) -> ChartKind:
        """First chart kind with data, in bar/pie/line order; bar when all are empty."""
        for kind in (ChartKind.BAR, ChartKind.PIE, ChartKind.LINE):
            if self.has_data(kind):
                return kind
        return ChartKind.BAR


class User(ApiModel):
    """Authenticated account as returned by the auth endpoints."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    email: str
    created_at: Optional[str] = None


class Session(BaseModel):
    """Current authentication identity of the client."""

    user: Optional[User] = None
    is_authenticated: bool = False

    model_config = ConfigDict(frozen=True)


class AuthPayload(ApiModel):
    """User and bearer token issued by login, register and refresh."""

    user: User
    token: str


class UploadedFile(ApiModel):
    """Entry of the uploaded-file listing."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    original_name: str
    file_type: str = ""
    row_count: int = 0
    upload_date: Optional[str] = None
    is_processed: bool = False


class FileData(ApiModel):
    """A stored file with its parsed rows and column schema."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    original_name: str
    data: List[Dict[str, Any]] = Field(default_factory=list)
    columns: List[Column] = Field(default_factory=list)
    row_count: int = 0
    file_type: str = ""
    upload_date: Optional[str] = None

    def to_table(self) -> Table:
        return Table(rows=self.data, columns=self.columns)


class UploadResult(ApiModel):
    """Column metadata returned after a successful upload."""

    file_id: str
    file_name: str
    file_type: str = ""
    row_count: int = 0
    columns: List[Column] = Field(default_factory=list)
    upload_date: Optional[str] = None


class SummaryStats(ApiModel):
    """Descriptive statistics computed by the backend."""

    row_count: int = 0
    column_count: int = 0
    columns: List[Dict[str, Any]] = Field(default_factory=list)
    numeric_stats: Optional[Dict[str, Any]] = None
    categorical_stats: Optional[Dict[str, Any]] = None
    date_stats: Optional[Dict[str, Any]] = None


class SummaryResult(ApiModel):
    file_id: str
    file_name: str = ""
    summary_stats: SummaryStats = Field(default_factory=SummaryStats)


class InsightsResult(ApiModel):
    """Free-text AI insights for a file."""

    file_id: str
    file_name: str = ""
    insights: str = ""
    summary_stats: SummaryStats = Field(default_factory=SummaryStats)
    generated_at: Optional[str] = None


class ChatReply(ApiModel):
    """Answer to a question asked about a file."""

    file_id: str
    file_name: str = ""
    question: str = ""
    answer: str = ""
    timestamp: Optional[str] = None


class ChatMessage(BaseModel):
    """A single message in the chat transcript."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message text content")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the message was created",
    )
