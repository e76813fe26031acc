from __future__ import annotations

import re

from citasks.ci import CI, Tasks
from citasks.dsl import action, cmd, multi_step, script, upload_artifact, when, workflow, push
from citasks.dsl import rust_toolchain
from citasks.model import Platform
from citasks.render import render_step_text

EXPECTED_TESTS_JOB = """\
name: ci-tests
on: [push, pull_request]
jobs:
  tests-ubuntu-latest:
    runs-on: ubuntu-latest
    steps:
    - uses: actions/checkout@v3
    - uses: ructions/toolchain@v2
      with:
        toolchain: 1.73
        profile: minimal
        default: true
        components: clippy
    - uses: Swatinem/rust-cache@v2
    - run: cargo test
"""


def _identities(text: str) -> list[str]:
    return re.findall(r"^  (\S+):$", text, flags=re.MULTILINE)


def test_render_single_job():
    ci = CI().job(
        Tasks("tests", Platform.UBUNTU_LATEST, rust_toolchain("1.73").minimal().default().clippy())
        .cmd("cargo", ["test"])
    )
    assert ci.into_workflow().render() == EXPECTED_TESTS_JOB


def test_render_run_variants():
    assert render_step_text(cmd("cargo", ["doc"])) == "    - run: cargo doc\n"
    assert render_step_text(cmd("npm", ["ci"]).in_directory("web")) == (
        "    - working-directory: web\n"
        "      run: npm ci\n"
    )
    assert render_step_text(script([["cargo", "fmt"], ["cargo", "test"]]).in_directory("crates")) == (
        "    - working-directory: crates\n"
        "      run: |\n"
        "        cargo fmt\n"
        "        cargo test\n"
    )


def test_render_action_without_params_has_no_with_block():
    assert render_step_text(action("actions/checkout@v3")) == "    - uses: actions/checkout@v3\n"


def test_render_action_with_params():
    assert render_step_text(upload_artifact("wheels", "dist")) == (
        "    - uses: actions/upload-artifact@v3\n"
        "      with:\n"
        "        name: wheels\n"
        "        path: dist\n"
    )


def test_render_multi_and_empty_steps_preserve_order():
    step = multi_step(
        cmd("a"),
        when(False, cmd("skipped")),
        multi_step(cmd("b"), when(True, cmd("c"))),
    )
    assert render_step_text(step) == "    - run: a\n    - run: b\n    - run: c\n"


def test_render_workflow_without_jobs():
    assert workflow("empty").on(push()).render() == "name: empty\non: [push]\njobs:\n"


def test_render_is_deterministic():
    first = CI.standard_workflow().into_workflow().render()
    second = CI.standard_workflow().into_workflow().render()
    wf = CI.standard_workflow().into_workflow()
    assert first == second
    assert wf.render() == wf.render() == str(wf)


def test_same_task_on_two_platforms_gets_two_identities():
    rust = rust_toolchain("stable")
    ci = (
        CI()
        .job(Tasks("tests", Platform.UBUNTU_LATEST, rust).cmd("cargo", ["test"]))
        .job(Tasks("tests", Platform.WINDOWS_LATEST, rust).cmd("cargo", ["test"]))
    )
    text = ci.into_workflow().render()

    assert _identities(text) == ["tests-ubuntu-latest", "tests-windows-latest"]
    blocks = text.split("  tests-windows-latest:\n")
    assert "    runs-on: ubuntu-latest\n" in blocks[0]
    assert blocks[1].startswith("    runs-on: windows-latest\n")


def test_standard_workflow_jobs():
    text = CI.standard_workflow().into_workflow().render()
    identities = _identities(text)

    assert len(identities) == 1 + 2 * len(Platform.latest())
    assert len(set(identities)) == len(identities)
    assert identities == [
        "tests-ubuntu-latest",
        "tests-macos-latest",
        "tests-windows-latest",
        "release-tests-ubuntu-latest",
        "release-tests-macos-latest",
        "release-tests-windows-latest",
        "lints-ubuntu-latest",
    ]


def test_standard_lints_job_text():
    text = CI().standard_lints("nightly-2023-10-14", "0.1.43").into_workflow().render()
    assert text.endswith(
        "  lints-ubuntu-latest:\n"
        "    runs-on: ubuntu-latest\n"
        "    steps:\n"
        "    - uses: actions/checkout@v3\n"
        "    - uses: ructions/toolchain@v2\n"
        "      with:\n"
        "        toolchain: nightly-2023-10-14\n"
        "        profile: minimal\n"
        "        default: true\n"
        "        components: rustfmt\n"
        "    - uses: Swatinem/rust-cache@v2\n"
        "    - run: cargo fmt --all -- --check\n"
        "    - run: cargo install cargo-udeps --locked --version 0.1.43\n"
        "    - run: cargo udeps --all-targets\n"
    )


def test_standard_tests_commands():
    text = CI().standard_tests("1.73").into_workflow().render()
    ubuntu = text.split("  tests-macos-latest:\n")[0]
    runs = re.findall(r"- run: (.*)$", ubuntu, flags=re.MULTILINE)
    assert runs == [
        "cargo xtask codegen --check",
        "cargo clippy --all-targets -- -D warnings -D clippy::all",
        "cargo test",
        "cargo build --all-targets",
        "cargo doc",
    ]
