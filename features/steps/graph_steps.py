from __future__ import annotations

from collections import Counter
from typing import List

from behave import given, then, when

from markovgraph.errors import GraphInvariantError
from markovgraph.export import render_graphviz
from markovgraph.graph import END, TransitionGraph
from markovgraph.sampling import WeightedSampler


def _tokens(raw: str) -> List[str]:
    return [token.strip() for token in raw.split(",") if token.strip()]


def _graph(context) -> TransitionGraph:
    if context.graph is None:
        context.graph = TransitionGraph()
    return context.graph


@given("an empty transition graph")
def step_empty_graph(context) -> None:
    context.graph = TransitionGraph()


@given('the chain "{chain}" is ingested')
@when('I ingest the chain "{chain}"')
def step_ingest_chain(context, chain: str) -> None:
    _graph(context).add_chain(_tokens(chain))


@given("these chains are ingested:")
@when("I ingest these chains:")
def step_ingest_chain_table(context) -> None:
    graph = _graph(context)
    for row in context.table:
        graph.add_chain(_tokens(row["chain"]))


@when("I ingest an empty chain")
def step_ingest_empty_chain(context) -> None:
    _graph(context).add_chain([])


@given("a sampler seeded with {seed:d}")
def step_seeded_sampler(context, seed: int) -> None:
    context.sampler = WeightedSampler.seeded(seed)


@when("I generate {count:d} chains")
def step_generate_chains(context, count: int) -> None:
    generator = context.graph.generator(sampler=context.sampler)
    context.generated = [tuple(generator.generate()) for _ in range(count)]


@when("I generate from the graph")
def step_generate_once(context) -> None:
    try:
        context.generated = [tuple(context.graph.generate(sampler=context.sampler))]
        context.last_error = None
    except GraphInvariantError as exc:
        context.last_error = exc


@when("I sample {count:d} times from the distribution:")
def step_sample_distribution(context, count: int) -> None:
    distribution = {row["key"]: int(row["count"]) for row in context.table}
    sampler = context.sampler or WeightedSampler()
    context.samples = Counter(sampler.sample(distribution) for _ in range(count))


@when("I sample from an empty distribution")
def step_sample_empty(context) -> None:
    try:
        WeightedSampler().sample({})
        context.last_error = None
    except GraphInvariantError as exc:
        context.last_error = exc


@then("the graph has nodes {values}")
def step_graph_nodes(context, values: str) -> None:
    expected = [value.strip().strip('"') for value in values.split(",")]
    assert [node.value for node in context.graph.nodes] == expected


@then("the graph has no nodes")
def step_graph_no_nodes(context) -> None:
    assert len(context.graph) == 0


@then('the start count of "{value}" is {count:d}')
def step_start_count(context, value: str, count: int) -> None:
    assert context.graph.start_count(value) == count


@then('the edge count from "{source}" to "{target}" is {count:d}')
def step_edge_count(context, source: str, target: str, count: int) -> None:
    assert context.graph.edge_count(source, target) == count


@then('the end count of "{value}" is {count:d}')
def step_end_count(context, value: str, count: int) -> None:
    assert context.graph.end_count(value) == count


@then("the start distribution points at the end marker {count:d} time")
@then("the start distribution points at the end marker {count:d} times")
def step_start_end_count(context, count: int) -> None:
    assert context.graph.start_distribution.get(END, 0) == count


@then('every generated chain is "{chain}"')
def step_every_generated(context, chain: str) -> None:
    expected = tuple(_tokens(chain))
    assert context.generated
    assert all(generated == expected for generated in context.generated), context.generated


@then("the generated chains are only:")
def step_generated_only(context) -> None:
    allowed = {tuple(_tokens(row["chain"])) for row in context.table}
    assert set(context.generated) == allowed, set(context.generated)


@then('the chain "{chain}" makes up between {low:d}% and {high:d}% of generated chains')
def step_generated_share(context, chain: str, low: int, high: int) -> None:
    expected = tuple(_tokens(chain))
    share = 100.0 * sum(1 for generated in context.generated if generated == expected)
    share /= len(context.generated)
    assert low <= share <= high, share


@then("every generated chain follows recorded transitions")
def step_generated_follow_edges(context) -> None:
    graph = context.graph
    for generated in context.generated:
        assert graph.start_count(generated[0]) > 0
        for current, following in zip(generated, generated[1:]):
            assert graph.edge_count(current, following) > 0
        assert graph.end_count(generated[-1]) > 0


@then("the generated chain is empty")
def step_generated_empty(context) -> None:
    assert context.generated == [()]


@then('the ratio of "{heavy}" to "{light}" samples is within {tolerance:d}% of {ratio:d}')
def step_sample_ratio(context, heavy: str, light: str, tolerance: int, ratio: int) -> None:
    observed = context.samples[heavy] / context.samples[light]
    assert abs(observed - ratio) <= ratio * tolerance / 100.0, observed


@then('a graph invariant error mentions "{text}"')
def step_invariant_error(context, text: str) -> None:
    assert isinstance(context.last_error, GraphInvariantError)
    assert text in str(context.last_error)


@then('the graphviz rendering contains "{text}"')
def step_graphviz_contains(context, text: str) -> None:
    assert text in render_graphviz(context.graph)
