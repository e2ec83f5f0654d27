from __future__ import annotations

import json
import shlex

from behave import given, then, when

from features.environment import run_markovgraph


@given('a text file "{name}" containing:')
def step_text_file(context, name: str) -> None:
    path = context.workdir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(str(context.text or "") + "\n", encoding="utf-8")


@given('a message archive "{name}" with messages:')
def step_message_archive(context, name: str) -> None:
    messages = []
    for row in context.table:
        kind = row["kind"] if "kind" in row.headings else "string"
        if kind == "rich":
            messages.append({"text": [row["text"], {"type": "bold", "text": "!"}]})
        else:
            messages.append({"text": row["text"]})
    path = context.workdir / name
    path.write_text(json.dumps({"name": "export", "messages": messages}), encoding="utf-8")


@given('a file "{name}" containing "{content}"')
def step_raw_file(context, name: str, content: str) -> None:
    (context.workdir / name).write_text(content, encoding="utf-8")


@when("I run markovgraph with arguments:")
def step_run_markovgraph_text(context) -> None:
    run_markovgraph(context, shlex.split(str(context.text or "")))


@when('I run markovgraph "{arguments}"')
def step_run_markovgraph(context, arguments: str) -> None:
    run_markovgraph(context, shlex.split(arguments))


@then("the command succeeds")
def step_command_succeeds(context) -> None:
    result = context.last_result
    assert result is not None
    assert result.returncode == 0, result.stderr


@then("the command fails with exit code {code:d}")
def step_command_fails(context, code: int) -> None:
    result = context.last_result
    assert result is not None
    assert result.returncode == code, (result.returncode, result.stderr)


@then('standard output contains "{text}"')
def step_stdout_contains(context, text: str) -> None:
    assert text in context.last_result.stdout, context.last_result.stdout


@then('standard error contains "{text}"')
def step_stderr_contains(context, text: str) -> None:
    assert text in context.last_result.stderr, context.last_result.stderr


@then("standard output lines are:")
def step_stdout_lines(context) -> None:
    expected = [line for line in str(context.text or "").splitlines()]
    assert context.last_result.stdout.splitlines() == expected, context.last_result.stdout


@then('the file "{name}" exists')
def step_file_exists(context, name: str) -> None:
    assert (context.workdir / name).is_file()


@then('the file "{name}" does not exist')
def step_file_missing(context, name: str) -> None:
    assert not (context.workdir / name).exists()


@then('the file "{name}" contains "{text}"')
def step_file_contains(context, name: str, text: str) -> None:
    content = (context.workdir / name).read_text(encoding="utf-8")
    assert text in content, content


@then('the summary field "{field}" is {value:d}')
def step_summary_field(context, field: str, value: int) -> None:
    summary = json.loads(context.last_result.stdout)
    assert summary[field] == value, summary
