"""Tests for search-root resolution."""

import os
import tempfile

from gitwip.config import ENV_ROOTS, resolve_search


def test_explicit_paths_win_over_env():
    with tempfile.TemporaryDirectory() as tmp:
        a = os.path.join(tmp, "a")
        b = os.path.join(tmp, "b")
        os.makedirs(a)
        os.makedirs(b)
        plan = resolve_search([a], environ={ENV_ROOTS: b}, cwd=tmp, home=tmp)
        assert plan.mode == "args"
        assert plan.roots == [a]
        assert plan.repo is None


def test_explicit_paths_drop_missing_and_files():
    with tempfile.TemporaryDirectory() as tmp:
        f = os.path.join(tmp, "file.txt")
        with open(f, "w") as fh:
            fh.write("x")
        plan = resolve_search([os.path.join(tmp, "nope"), f, tmp], environ={})
        assert plan.mode == "args"
        assert plan.roots == [tmp]


def test_explicit_paths_none_exist_no_fallback():
    plan = resolve_search(["/nonexistent/one", "/nonexistent/two"], environ={})
    assert plan.mode == "args"
    assert plan.roots == []


def test_env_roots_whitespace_separated():
    with tempfile.TemporaryDirectory() as tmp:
        a = os.path.join(tmp, "a")
        b = os.path.join(tmp, "b")
        os.makedirs(a)
        os.makedirs(b)
        env = {ENV_ROOTS: f"  {a}\n{b}\t{os.path.join(tmp, 'missing')} "}
        plan = resolve_search([], environ=env, cwd=tmp, home=tmp)
        assert plan.mode == "env"
        assert plan.roots == [a, b]


def test_blank_env_is_ignored():
    with tempfile.TemporaryDirectory() as tmp:
        tmp = os.path.realpath(tmp)
        plan = resolve_search([], environ={ENV_ROOTS: "   "}, cwd=tmp, home=tmp)
        assert plan.mode == "home"
        assert plan.roots == [tmp]


def test_inside_repo_uses_current_repo_only():
    with tempfile.TemporaryDirectory() as tmp:
        repo = os.path.join(os.path.realpath(tmp), "repo")
        os.makedirs(os.path.join(repo, ".git"))
        os.makedirs(os.path.join(repo, "src", "pkg"))
        plan = resolve_search([], environ={}, cwd=os.path.join(repo, "src", "pkg"), home=tmp)
        assert plan.mode == "current"
        assert plan.repo == repo
        assert plan.roots == []


def test_outside_repo_falls_back_to_home():
    with tempfile.TemporaryDirectory() as tmp:
        tmp = os.path.realpath(tmp)
        home = os.path.join(tmp, "home")
        work = os.path.join(tmp, "work", "notes")
        os.makedirs(home)
        os.makedirs(work)
        plan = resolve_search([], environ={}, cwd=work, home=home)
        assert plan.mode == "home"
        assert plan.roots == [home]
        assert plan.repo is None
