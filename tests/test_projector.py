"""
Tests for projector definition, composition and piping.
"""
import pytest

from fall_core.abort import AbortController
from fall_core.builtin import list_source, regexp, unique
from fall_core.curator import Curator, CurateParams, define_curator
from fall_core.derivable import Factory, Value
from fall_core.exceptions import AbortError, ContractError
from fall_core.item import IdItem
from fall_core.picker import materialize
from fall_core.projector import (
    Projector,
    ProjectParams,
    compose_projectors,
    define_projector,
    pipe_projectors,
)
from fall_core.source import CollectParams, Source, define_source


def make_items(*values):
    return [IdItem(id=i, value=v, detail={"path": v, "line": i + 1}) for i, v in enumerate(values)]


async def aiter_list(items, pulled=None):
    for item in items:
        if pulled is not None:
            pulled.append(item.id)
        yield item


def suffix_projector(suffix):
    async def project(host, params, *, signal=None):
        async for item in params.items:
            yield item.model_copy(update={"value": item.value + suffix})
    return define_projector(project)


def double_line():
    async def project(host, params, *, signal=None):
        async for item in params.items:
            yield item.model_copy(update={"detail": {**item.detail, "line": item.detail["line"] * 2}})
    return define_projector(project)


def drop_odd_ids():
    async def project(host, params, *, signal=None):
        async for item in params.items:
            if item.id % 2 == 0:
                yield item
    return define_projector(project)


def closing_stage(name, closed):
    async def project(host, params, *, signal=None):
        try:
            async for item in params.items:
                yield item
        finally:
            closed.append(name)
    return define_projector(project)


async def closing_items(items, closed):
    try:
        for item in items:
            yield item
    finally:
        closed.append("input")


class TestComposeProjectors:

    @pytest.mark.asyncio
    async def test_matches_manual_threading(self, host, collect_all):
        items = make_items("a", "b", "c", "d")
        p1, p2, p3 = suffix_projector("1"), drop_odd_ids(), suffix_projector("2")

        composed = compose_projectors(p1, p2, p3)
        result = await collect_all(
            composed.project(host, ProjectParams(items=aiter_list(items)))
        )

        stream = aiter_list(items)
        for p in (p1, p2, p3):
            stream = p.project(host, ProjectParams(items=stream))
        expected = await collect_all(stream)

        assert result == expected
        assert [i.value for i in result] == ["a12", "c12"]

    @pytest.mark.asyncio
    async def test_single_projector_is_identity_of_composition(self, host, collect_all):
        items = make_items("x", "y")
        p = suffix_projector("!")

        direct = await collect_all(p.project(host, ProjectParams(items=aiter_list(items))))
        composed = await collect_all(
            compose_projectors(p).project(host, ProjectParams(items=aiter_list(items)))
        )

        assert composed == direct

    def test_zero_projectors_rejected(self):
        with pytest.raises(ContractError):
            compose_projectors()

    @pytest.mark.asyncio
    async def test_factories_resolved_per_invocation(self, host, collect_all):
        calls = []

        def factory():
            calls.append(1)
            return suffix_projector("-")

        composed = compose_projectors(factory, Value(suffix_projector("+")))
        assert calls == []

        await collect_all(composed.project(host, ProjectParams(items=aiter_list(make_items("a")))))
        await collect_all(composed.project(host, ProjectParams(items=aiter_list(make_items("b")))))

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_pull_is_demand_driven(self, host):
        pulled = []
        items = make_items("a", "b", "c")
        composed = compose_projectors(suffix_projector("1"), suffix_projector("2"))

        stream = composed.project(host, ProjectParams(items=aiter_list(items, pulled)))
        assert pulled == []

        first = await stream.__anext__()
        assert first.value == "a12"
        assert pulled == [0]

        second = await stream.__anext__()
        assert second.value == "b12"
        assert pulled == [0, 1]
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_stage_failure_propagates_unchanged(self, host):
        async def failing(host, params, *, signal=None):
            async for item in params.items:
                if item.id == 1:
                    raise ValueError("boom")
                yield item

        composed = compose_projectors(suffix_projector("1"), define_projector(failing))
        stream = composed.project(host, ProjectParams(items=aiter_list(make_items("a", "b", "c"))))

        seen = []
        with pytest.raises(ValueError, match="boom"):
            async for item in stream:
                seen.append(item.value)
        assert seen == ["a1"]

    @pytest.mark.asyncio
    async def test_signal_threaded_to_every_stage(self, host, collect_all):
        received = []

        def recording():
            async def project(host, params, *, signal=None):
                received.append(signal)
                async for item in params.items:
                    yield item
            return define_projector(project)

        signal = object()
        composed = compose_projectors(recording(), recording(), recording())
        await collect_all(
            composed.project(host, ProjectParams(items=aiter_list(make_items("a"))), signal=signal)
        )

        assert received == [signal, signal, signal]

    @pytest.mark.asyncio
    async def test_projector_subclass(self, host, collect_all):
        class Upper(Projector):
            async def project(self, host, params, *, signal=None):
                async for item in params.items:
                    yield item.model_copy(update={"value": item.value.upper()})

        composed = compose_projectors(Upper, suffix_projector("!"))
        result = await collect_all(
            composed.project(host, ProjectParams(items=aiter_list(make_items("a"))))
        )
        assert [i.value for i in result] == ["A!"]


class TestPipeProjectors:

    @pytest.mark.asyncio
    async def test_source_line_doubling(self, host, collect_all):
        async def collect(host, params, *, signal=None):
            yield IdItem(id=1, value="a.ts", detail={"path": "a.ts", "line": 2})

        piped = pipe_projectors(define_source(collect), double_line())
        result = await collect_all(piped.collect(host, CollectParams()))

        assert len(result) == 1
        assert result[0].id == 1
        assert result[0].detail == {"path": "a.ts", "line": 4}

    def test_source_stays_source(self):
        async def collect(host, params, *, signal=None):
            yield IdItem(id=0, value="a", detail={})

        piped = pipe_projectors(define_source(collect), suffix_projector("!"))

        assert isinstance(piped, Source)
        assert not isinstance(piped, Curator)
        assert hasattr(piped, "collect")
        assert not hasattr(piped, "curate")

    @pytest.mark.asyncio
    async def test_curator_stays_curator(self, host, collect_all):
        queries = []

        async def curate(host, params, *, signal=None):
            queries.append(params.query)
            for item in make_items("apple", "banana"):
                if params.query in item.value:
                    yield item

        piped = pipe_projectors(define_curator(curate), suffix_projector("!"))

        assert isinstance(piped, Curator)
        assert not isinstance(piped, Source)
        assert hasattr(piped, "curate")
        assert not hasattr(piped, "collect")

        result = await collect_all(piped.curate(host, CurateParams(query="an")))
        assert [i.value for i in result] == ["banana!"]
        assert queries == ["an"]

    def test_origin_resolved_once(self):
        calls = []

        def origin():
            calls.append(1)
            return define_source(lambda host, params, *, signal=None: aiter_list([]))

        pipe_projectors(Factory(origin), suffix_projector("!"))
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_reusable_template(self, host, collect_all):
        def counting():
            async def project(host, params, *, signal=None):
                count = 0
                async for item in params.items:
                    count += 1
                    yield item.model_copy(update={"value": f"{item.value}#{count}"})
            return define_projector(project)

        async def collect(host, params, *, signal=None):
            for item in make_items(*params.args):
                yield item

        piped = pipe_projectors(define_source(collect), counting())
        first = await collect_all(piped.collect(host, CollectParams(args=["a", "b"])))
        second = await collect_all(piped.collect(host, CollectParams(args=["c"])))

        assert [i.value for i in first] == ["a#1", "b#2"]
        assert [i.value for i in second] == ["c#1"]

    @pytest.mark.asyncio
    async def test_origin_failure_propagates(self, host):
        async def collect(host, params, *, signal=None):
            raise RuntimeError("origin failed")
            yield  # pragma: no cover

        piped = pipe_projectors(define_source(collect), suffix_projector("!"))
        with pytest.raises(RuntimeError, match="origin failed"):
            async for _ in piped.collect(host, CollectParams()):
                pass

    def test_neither_source_nor_curator_rejected(self):
        with pytest.raises(ContractError, match="neither"):
            pipe_projectors(Value(object()), suffix_projector("!"))

    def test_both_source_and_curator_rejected(self):
        class Both(Source, Curator):
            def collect(self, host, params, *, signal=None):
                return aiter_list([])

            def curate(self, host, params, *, signal=None):
                return aiter_list([])

        with pytest.raises(ContractError, match="both"):
            pipe_projectors(Both(), suffix_projector("!"))

    def test_zero_projectors_rejected(self):
        source = define_source(lambda host, params, *, signal=None: aiter_list([]))
        with pytest.raises(ContractError):
            pipe_projectors(source)


class TestEarlyStop:

    @pytest.mark.asyncio
    async def test_closing_composed_stream_closes_every_stage(self, host):
        closed = []
        composed = compose_projectors(closing_stage("first", closed), closing_stage("second", closed))
        stream = composed.project(
            host, ProjectParams(items=closing_items(make_items("a", "b", "c"), closed))
        )

        first = await stream.__anext__()
        assert first.value == "a"
        assert closed == []

        await stream.aclose()
        assert closed == ["second", "first", "input"]

    @pytest.mark.asyncio
    async def test_stage_failure_closes_upstream(self, host):
        closed = []

        async def failing(host, params, *, signal=None):
            async for item in params.items:
                raise ValueError(f"cannot project {item.value}")
            yield  # pragma: no cover

        composed = compose_projectors(closing_stage("first", closed), define_projector(failing))
        stream = composed.project(host, ProjectParams(items=closing_items(make_items("a", "b"), closed)))

        with pytest.raises(ValueError, match="cannot project a"):
            await stream.__anext__()
        assert closed == ["first", "input"]

    @pytest.mark.asyncio
    async def test_materialize_limit_closes_source_origin(self, host):
        cleanup = []

        async def collect(host, params, *, signal=None):
            try:
                for item in make_items("a", "a", "b"):
                    yield item
            finally:
                cleanup.append("origin closed")

        piped = pipe_projectors(define_source(collect), unique())
        items = await materialize(piped.collect(host, CollectParams()), limit=1)

        assert [i.value for i in items] == ["a"]
        assert cleanup == ["origin closed"]

    @pytest.mark.asyncio
    async def test_materialize_limit_closes_curator_origin(self, host):
        cleanup = []

        async def curate(host, params, *, signal=None):
            try:
                for item in make_items("apple", "grape", "melon"):
                    if params.query in item.value:
                        yield item
            finally:
                cleanup.append("origin closed")

        piped = pipe_projectors(define_curator(curate), suffix_projector("!"), unique())
        items = await materialize(piped.curate(host, CurateParams(query="ap")), limit=1)

        assert [i.value for i in items] == ["apple!"]
        assert cleanup == ["origin closed"]

    @pytest.mark.asyncio
    async def test_abort_after_first_item_stops_piped_stream(self, host):
        controller = AbortController()
        piped = pipe_projectors(
            list_source(["a.py", "b.txt", "a.py", "c.py"]),
            unique(),
            regexp(includes=[r"\.py$"]),
        )
        stream = piped.collect(host, CollectParams(), signal=controller.signal)

        first = await stream.__anext__()
        assert first.value == "a.py"

        controller.abort("picker closed")
        with pytest.raises(AbortError, match="picker closed"):
            await stream.__anext__()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
