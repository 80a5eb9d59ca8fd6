from __future__ import annotations

"""
Integration tests for collection-returning operations.

Verifies walk windows, filter chains and every container/element pairing
(lists, tuples and iterators of paths, values and nested contracts), plus
the failures raised while enumerating.
"""

import os
import types
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

import pytest

from dirshape import (
    BindOptions,
    Dir,
    FilterInstantiationFailed,
    MissingTarget,
    PathFilter,
    WalkFailed,
    WrapperConstructionFailed,
    bind,
    filter_by,
    must_exist,
    name,
    walk,
)

SOURCES = [
    "src/main/java/io/superbiz/colors/Red.java",
    "src/main/java/io/superbiz/colors/Green.java",
    "src/main/java/io/superbiz/colors/Blue.java",
    "src/test/java/io/superbiz/colors/RedTest.java",
    "src/test/java/io/superbiz/colors/GreenTest.java",
    "src/test/java/io/superbiz/colors/BlueTest.java",
]


class IsJava(PathFilter):
    def test(self, path: Path) -> bool:
        return path.name.endswith(".java")


class IsTest(PathFilter):
    def test(self, path: Path) -> bool:
        return path.stem.endswith("Test")


class HasPomXml:
    def __call__(self, path: Path) -> bool:
        return (path / "pom.xml").exists()


class NeedsArgument(PathFilter):
    def __init__(self, suffix: str) -> None:
        self.suffix = suffix

    def test(self, path: Path) -> bool:
        return path.name.endswith(self.suffix)


class Source:
    def __init__(self, path: Path) -> None:
        self.path = path


class Unreadable:
    def __init__(self, path: Path) -> None:
        raise ValueError(f"cannot read {path.name}")


class Java(Dir):
    pass


class Work(Dir):
    @walk
    def everything(self) -> Iterator[Path]: ...

    @walk(max_depth=1)
    def max_one(self) -> List[Path]: ...

    @walk(max_depth=2)
    def max_two(self) -> List[Path]: ...

    @walk(min_depth=2)
    def min_two(self) -> List[Path]: ...

    @name("repository")
    @walk(min_depth=2, max_depth=2)
    def artifacts(self) -> List[Path]: ...

    def children(self) -> Sequence[Path]: ...


class Module(Dir):
    @name("pom.xml")
    def pom_xml(self) -> Path: ...

    @filter_by(HasPomXml)
    def modules(self) -> List[Module]: ...

    @filter_by(HasPomXml)
    def module_tuple(self) -> Tuple[Module, ...]: ...

    @walk
    @filter_by(IsJava)
    def sources(self) -> List[Path]: ...

    @walk
    @filter_by(IsJava, IsTest)
    def tests(self) -> List[Path]: ...

    @walk
    @filter_by(IsJava)
    def source_stream(self) -> Iterator[Source]: ...

    @walk
    @filter_by(IsJava)
    def java_bindings(self) -> Iterator[Java]: ...

    @walk
    @filter_by(IsJava)
    def unreadable(self) -> List[Unreadable]: ...

    @filter_by(NeedsArgument)
    def misconfigured(self) -> List[Path]: ...

    def listing(self, name: str) -> List[Path]: ...

    @name("generated")
    def generated(self) -> List[Path]: ...

    @must_exist
    @name("generated")
    def required_generated(self) -> List[Path]: ...

    @walk
    def tree(self) -> List[Path]: ...


@pytest.fixture
def sources_tree(make_tree) -> Path:
    return make_tree(SOURCES)


@pytest.fixture
def multi_module(make_tree) -> Path:
    entries = ["pom.xml", "notes/"]
    for submodule in ("red", "green", "blue"):
        entries += [
            f"{submodule}/pom.xml",
            f"{submodule}/src/main/java/",
            f"{submodule}/src/test/java/",
            f"{submodule}/target/",
        ]
    return make_tree(entries)


def _absolute(paths) -> List[str]:
    return sorted(str(Path(p).absolute()) for p in paths)


def test_unbounded_walk_visits_everything(repository_tree, as_relative):
    """Bare @walk yields the anchor and every descendant in pre-order."""
    work = bind(Work, repository_tree)
    result = work.everything()

    assert isinstance(result, types.GeneratorType)
    paths = as_relative(repository_tree, result)
    assert paths[:2] == ["/", "/repository/"]
    assert len(paths) == 22


def test_walk_windows(repository_tree, as_relative):
    """Depth windows are measured from the collection root."""
    work = bind(Work, repository_tree)

    assert as_relative(repository_tree, work.max_one()) == ["/", "/repository/"]
    assert as_relative(repository_tree, work.max_two()) == [
        "/",
        "/repository/",
        "/repository/io.tomitribe/",
        "/repository/junit/",
        "/repository/org.color/",
        "/repository/org.color.bright/",
    ]

    deep = as_relative(repository_tree, work.min_two())
    assert len(deep) == 20
    assert "/repository/" not in deep


def test_named_collection_root(repository_tree, as_relative):
    """@name moves the enumeration root to the named child."""
    work = bind(Work, repository_tree)
    assert as_relative(repository_tree, work.artifacts()) == [
        "/repository/io.tomitribe/crest/",
        "/repository/junit/junit/",
        "/repository/org.color/red/",
        "/repository/org.color.bright/green/",
    ]


def test_default_enumeration_is_direct_children(repository_tree):
    """Without @walk only the direct children of the anchor are listed."""
    assert bind(Work, repository_tree).children() == [repository_tree / "repository"]


def test_filtered_list_of_modules(multi_module):
    """Only children holding a pom.xml become nested module bindings."""
    modules = bind(Module, multi_module).modules()

    assert [m.get().name for m in modules] == ["blue", "green", "red"]
    for module in modules:
        assert isinstance(module, Module)
        assert module.pom_xml().exists()


def test_filtered_tuple_of_modules(multi_module):
    """Tuple[T, ...] produces a tuple with the same elements."""
    module = bind(Module, multi_module)
    result = module.module_tuple()

    assert isinstance(result, tuple)
    assert list(result) == module.modules()


def test_walked_and_filtered_paths(sources_tree):
    """Recursive enumeration keeps only the accepted files."""
    sources = bind(Module, sources_tree).sources()
    assert _absolute(sources) == _absolute(sources_tree / p for p in SOURCES)


def test_filters_combine_with_and(sources_tree):
    """Both filters must accept a candidate."""
    tests = bind(Module, sources_tree).tests()
    assert sorted(p.name for p in tests) == ["BlueTest.java", "GreenTest.java", "RedTest.java"]


def test_iterator_of_wrapped_values(sources_tree):
    """Iterator[T] lazily builds one value per accepted path."""
    result = bind(Module, sources_tree).source_stream()

    assert isinstance(result, types.GeneratorType)
    values = list(result)
    assert all(isinstance(v, Source) for v in values)
    assert _absolute(v.path for v in values) == _absolute(sources_tree / p for p in SOURCES)


def test_iterator_of_bindings(sources_tree):
    """Accepted paths may be bound as nested contracts."""
    bindings = list(bind(Module, sources_tree).java_bindings())

    assert len(bindings) == len(SOURCES)
    assert all(isinstance(b, Java) for b in bindings)
    assert _absolute(b.get() for b in bindings) == _absolute(sources_tree / p for p in SOURCES)


def test_argument_selects_the_collection_root(sources_tree):
    """An explicit argument replaces the enumeration root."""
    listing = bind(Module, sources_tree).listing("src")
    assert [p.name for p in listing] == ["main", "test"]


def test_construction_failure_surfaces(sources_tree):
    """A raising value constructor aborts the enumeration."""
    with pytest.raises(WrapperConstructionFailed) as excinfo:
        bind(Module, sources_tree).unreadable()
    assert excinfo.value.target_type is Unreadable
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_filter_instantiation_failure(sources_tree):
    """A filter without a no-argument constructor fails the call."""
    with pytest.raises(FilterInstantiationFailed) as excinfo:
        bind(Module, sources_tree).misconfigured()
    assert excinfo.value.filter_class is NeedsArgument


def test_missing_collection_root(tmp_path):
    """A missing root fails eagerly, or as MissingTarget when opted in."""
    module = bind(Module, tmp_path)

    with pytest.raises(WalkFailed):
        module.generated()
    with pytest.raises(MissingTarget):
        module.required_generated()


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks required")
def test_follow_symlinks_propagates_to_nested_bindings(make_tree):
    """Options given to bind() are inherited by every nested binding."""
    root = make_tree(["app/real/inner.txt"])
    os.symlink(root / "app" / "real", root / "app" / "link", target_is_directory=True)

    plain = bind(Dir, root).dir("app")
    following = bind(Dir, root, options=BindOptions(follow_symlinks=True)).dir("app")

    assert root / "app" / "link" / "inner.txt" not in list(plain.walk())
    assert root / "app" / "link" / "inner.txt" in list(following.walk())
    assert root / "app" / "link" / "inner.txt" in bind(
        Module, root / "app", options=BindOptions(follow_symlinks=True)
    ).tree()
