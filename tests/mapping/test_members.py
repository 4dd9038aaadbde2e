import dataclasses
from dataclasses import InitVar, dataclass
from typing import Any, ClassVar, Final

import attrs
import pytest
from pydantic import BaseModel, ConfigDict, Field, computed_field
from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    registry,
    relationship,
)

from mapfy.mapping.members import (
    MemberDescriptor,
    describe_members,
    match_by_name,
    readable_members,
    settable_members,
)


@dataclass
class Base:
    id: int = 0
    label: str = ""


@dataclass
class Derived(Base):
    extra: float = 0.0
    label: str = "derived"
    total: ClassVar[int] = 0
    _secret: str = ""
    seed: InitVar[int] = 0
    kind: Final[str] = "derived"


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0
    y: int = 0


class Plain:
    name: str
    tags: list["Plain"]

    def __init__(self) -> None:
        self.name = ""
        self._size = 0

    @property
    def size(self) -> int:
        return self._size

    @size.setter
    def size(self, value: int) -> None:
        self._size = value

    @property
    def display(self) -> str:
        return self.name.title()

    @property
    def untyped(self):
        return None


class Broken:
    value: "Undefined"  # noqa: F821


class Model(BaseModel):
    name: str = ""
    count: int | None = None
    locked: str = Field(default="", frozen=True)

    @computed_field
    @property
    def upper(self) -> str:
        return self.name.upper()


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""


@attrs.define
class AttrsThing:
    name: str = ""
    count: int = 0


@attrs.frozen
class FrozenAttrsThing:
    name: str = ""


class OrmBase(DeclarativeBase):
    pass


class Author(OrmBase):
    __tablename__ = "author"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(default="")
    books: Mapped[list["Book"]] = relationship(back_populates="author")


class Book(OrmBase):
    __tablename__ = "book"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str | None]
    author_id: Mapped[int] = mapped_column(ForeignKey("author.id"))
    author: Mapped[Author] = relationship(back_populates="books")


classic_registry = registry()


class ClassicUser:
    pass


classic_registry.map_imperatively(
    ClassicUser,
    Table(
        "classic_user",
        classic_registry.metadata,
        Column("id", Integer, primary_key=True),
        Column("email", String(100)),
    ),
)


def _by_name(members: tuple[MemberDescriptor, ...]) -> dict[str, MemberDescriptor]:
    return {it.name: it for it in members}


def test_dataclass_members_follow_declaration_order_base_first() -> None:
    assert [it.name for it in describe_members(Derived)] == ["id", "label", "extra", "kind"]


def test_redeclared_member_takes_subclass_declaration() -> None:
    assert _by_name(describe_members(Derived))["label"].tp is str


def test_final_members_are_readable_not_writable() -> None:
    kind = _by_name(describe_members(Derived))["kind"]
    assert kind.readable
    assert not kind.writable
    assert "kind" not in _by_name(settable_members(Derived))


def test_frozen_dataclass_members_are_not_settable() -> None:
    assert settable_members(FrozenPoint) == ()
    assert [it.name for it in readable_members(FrozenPoint)] == ["x", "y"]


def test_plain_class_annotations_and_properties() -> None:
    members = _by_name(describe_members(Plain))
    assert members["name"] == MemberDescriptor("name", str, "field")
    assert members["tags"].tp == list[Plain]
    assert members["size"] == MemberDescriptor("size", int, "property")
    assert members["display"] == MemberDescriptor("display", str, "property", writable=False)
    assert members["untyped"].tp is Any
    assert "_size" not in members


def test_unresolvable_annotation_falls_back_to_any() -> None:
    assert describe_members(Broken) == (MemberDescriptor("value", Any, "field"),)


def test_pydantic_fields_and_computed_fields() -> None:
    members = _by_name(describe_members(Model))
    assert members["name"] == MemberDescriptor("name", str, "field")
    assert members["count"].tp == int | None
    assert not members["locked"].writable
    assert members["upper"].tp is str
    assert members["upper"].readable
    assert not members["upper"].writable


def test_frozen_pydantic_model_is_not_settable() -> None:
    assert settable_members(FrozenModel) == ()


def test_attrs_members() -> None:
    assert [it.name for it in settable_members(AttrsThing)] == ["name", "count"]
    assert settable_members(FrozenAttrsThing) == ()
    assert [it.name for it in readable_members(FrozenAttrsThing)] == ["name"]


def test_sqlalchemy_declarative_members() -> None:
    members = _by_name(describe_members(Book))
    assert members["id"].tp is int
    assert members["title"].tp == str | None
    assert members["author"].tp is Author
    assert _by_name(describe_members(Author))["books"].tp == list[Book]
    assert "metadata" not in members
    assert "registry" not in members


def test_sqlalchemy_classically_mapped_members() -> None:
    members = _by_name(describe_members(ClassicUser))
    assert members["id"] == MemberDescriptor("id", int, "field")
    assert members["email"].tp is str


@pytest.mark.parametrize(
    ("name", "case_insensitive", "expected"),
    [
        ("Code", False, "Code"),
        ("code", False, None),
        ("code", True, "Code"),
        ("CODE", True, "Code"),
    ],
)
def test_match_by_name(name: str, case_insensitive: bool, expected: str | None) -> None:
    candidates = [MemberDescriptor("Code", str, "field"), MemberDescriptor("code", int, "field")]
    match = match_by_name(name, candidates[:1], case_insensitive)
    assert (match.name if match is not None else None) == expected


def test_first_candidate_wins_when_names_collide_ignoring_case() -> None:
    candidates = [MemberDescriptor("Code", str, "field"), MemberDescriptor("code", int, "field")]
    match = match_by_name("CODE", candidates, case_insensitive=True)
    assert match is candidates[0]
    assert match_by_name("code", candidates, case_insensitive=False) is candidates[1]


def test_dataclass_pseudo_fields_are_not_members() -> None:
    names = {it.name for it in describe_members(Derived)}
    assert "seed" not in names
    assert "total" not in names
    assert "seed" in Derived.__dataclass_fields__
    assert "_secret" in {it.name for it in dataclasses.fields(Derived)}
    assert "_secret" not in names
