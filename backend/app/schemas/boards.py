"""Board Pydantic schemas — API contracts for the insight canvases."""

from typing import Literal

from pydantic import BaseModel, Field

from app.domain.categories import Category, CategorySchema
from app.domain.drag import DragAction
from app.domain.editing import PendingEdit
from app.domain.snapshot import BlockRecord


class CategoryResponse(BaseModel):
    key: str
    label: str
    description: str
    parent: str | None = None
    seed_key: str
    max_blocks: int | None = None

    @classmethod
    def from_category(cls, category: Category) -> "CategoryResponse":
        return cls(
            key=category.key,
            label=category.label,
            description=category.description,
            parent=category.parent,
            seed_key=category.seed_key,
            max_blocks=category.max_blocks,
        )


class LayoutGroupResponse(BaseModel):
    category: str
    children: list[str] = Field(default_factory=list)


class CanvasResponse(BaseModel):
    """Category schema of one canvas plus its rendering groups."""

    name: str
    title: str
    categories: list[CategoryResponse] = Field(default_factory=list)
    layout: list[LayoutGroupResponse] = Field(default_factory=list)

    @classmethod
    def from_schema(cls, schema: CategorySchema) -> "CanvasResponse":
        return cls(
            name=schema.name,
            title=schema.title,
            categories=[CategoryResponse.from_category(c) for c in schema.categories],
            layout=[
                LayoutGroupResponse(
                    category=group.category.key,
                    children=[c.key for c in group.children],
                )
                for group in schema.layout()
            ],
        )


class BlockResponse(BaseModel):
    id: str
    category: str
    title: str
    content: str

    @classmethod
    def from_record(cls, record: BlockRecord) -> "BlockResponse":
        return cls(id=record.id, category=record.category, title=record.title, content=record.content)


class DragActionResponse(BaseModel):
    kind: Literal["reorder", "move"]
    block_id: str
    source_category: str
    target_category: str
    from_index: int
    to_index: int

    @classmethod
    def from_action(cls, action: DragAction) -> "DragActionResponse":
        return cls(
            kind=action.kind.value,
            block_id=action.block_id,
            source_category=action.source_category,
            target_category=action.target_category,
            from_index=action.from_index,
            to_index=action.to_index,
        )


class PendingEditResponse(BaseModel):
    block_id: str
    original: str
    text: str
    dirty: bool

    @classmethod
    def from_pending(cls, pending: PendingEdit) -> "PendingEditResponse":
        return cls(block_id=pending.block_id, original=pending.original, text=pending.text, dirty=pending.dirty)


class BoardResponse(BaseModel):
    """Flattened board snapshot.

    blocks defaults to empty array, never null. changed is False when the
    request was absorbed as a no-op.
    """

    idea_id: str
    canvas: str
    version: int
    blocks: list[BlockResponse] = Field(default_factory=list)
    changed: bool = False
    block_id: str | None = None
    drag: DragActionResponse | None = None
    pending_edit: PendingEditResponse | None = None


class ContextResponse(BaseModel):
    idea_id: str
    canvas: str
    context: dict[str, list[str]] = Field(default_factory=dict)


class MountBoardRequest(BaseModel):
    """Optional seed: logical category name -> initial texts."""

    seed: dict[str, list[str]] | None = None


class AddBlockRequest(BaseModel):
    category: str = Field(..., min_length=1)


class EditBlockRequest(BaseModel):
    text: str


class ReorderRequest(BaseModel):
    category: str
    from_index: int
    to_index: int


class MoveRequest(BaseModel):
    block_id: str
    from_category: str
    to_category: str
    at_index: int = 0


class DragRequest(BaseModel):
    """Drag-end gesture; over_id is null when released outside a target."""

    active_id: str | None = None
    over_id: str | None = None


class BeginEditRequest(BaseModel):
    block_id: str
