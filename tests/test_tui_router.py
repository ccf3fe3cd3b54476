"""Unit tests for Router dispatch and the screen/action registries."""
from __future__ import annotations

from myadm.db import QueryError
from myadm.tui.keys import Action
from myadm.tui.router import SCREENS, register_screen

from conftest import FakeExecutor, make_result


def test_router_start_opens_databases(make_router, server):
    router = make_router(server)
    view = router.nav.current()

    assert view.name == "databases"
    assert view.nitems == 2
    assert view.form.get("title") == "Databases in `localhost`"
    assert view.form.get("info") == "2 DB(s)"
    assert view.form.items == ["db1", "db2"]
    assert router.state.session_history == ["databases"]


def test_register_screen_decorator():
    """Test screen registration decorator."""
    original_screens = SCREENS.copy()
    SCREENS.clear()

    @register_screen("test_screen")
    def test_screen_fn(router, view):
        return None

    try:
        assert "test_screen" in SCREENS
        assert SCREENS["test_screen"] == test_screen_fn
    finally:
        SCREENS.clear()
        SCREENS.update(original_screens)


def test_select_database_opens_tables(make_router, server):
    """Selecting db1 opens a tables view titled with `db1`."""
    router = make_router(server)

    router.handle_key("enter")
    view = router.nav.current()

    assert view.name == "tables"
    assert "`db1`" in view.form.get("title")
    assert view.scope == {"database": "db1"}
    assert server.selected == ["db1"]
    assert view.form.get("info") == "2 table(s)"


def test_select_table_opens_records(make_router, server):
    """Selecting t1 under db1 opens records titled with both names."""
    router = make_router(server)
    router.handle_key("enter")
    router.handle_key(" ")
    view = router.nav.current()

    assert view.name == "records"
    title = view.form.get("title")
    assert "`db1`" in title and "`t1`" in title
    assert [f.name for f in view.fields] == ["id", "name"]
    assert view.form.get("showsubtle") == "1"
    assert view.form.get("subtle").startswith("id | name")
    assert view.nitems == 2


def test_item_select_clamps(make_router, server):
    router = make_router(server)
    view = router.nav.current()

    router.handle_key("k")
    assert view.cursor == 0
    router.handle_key("j")
    router.handle_key("down")
    assert view.cursor == view.nitems - 1


def test_back_at_root_is_noop(make_router, server):
    router = make_router(server)
    router.handle_key("enter")
    router.handle_key("q")
    assert router.nav.depth() == 1

    # At the root `q` quits (no confirmation) instead of going back.
    router.handle_key("q")
    assert router.nav.depth() == 1
    assert router.state.running is False


def test_quit_confirmation_declined_keeps_running(make_router, server, keys):
    router = make_router(server)
    keys.extend(["x", "n"])

    router.handle_key("Q")
    assert router.state.running is True
    assert router.nav.current().form.get("status") == ""


def test_quit_confirmation_enter_accepts(make_router, server, keys):
    router = make_router(server)
    keys.append("enter")

    router.handle_key("Q")
    assert router.state.running is False


def test_quit_without_confirmation_setting(make_router, server, settings):
    settings.MYADM_CONFIRM_QUIT = False
    router = make_router(server)

    router.handle_key("Q")
    assert router.state.running is False


def test_unbound_key_is_ignored(make_router, server):
    router = make_router(server)
    router.message("keep me")

    assert router.handle_key("z") is None
    assert router.nav.current().form.get("status") == "keep me"


def test_status_cleared_before_action(make_router, server):
    router = make_router(server)
    router.message("old news")

    router.handle_key("j")
    assert router.nav.current().form.get("status") == ""


def test_query_failure_leaves_view_unchanged(make_router, server):
    """A failing query turns into a status message on the current view."""
    router = make_router(server)
    server.responses["SHOW TABLES"] = QueryError("Access denied for user")

    router.handle_key("enter")
    view = router.nav.current()

    assert view.name == "databases"
    assert router.nav.depth() == 1
    assert view.nitems == 2
    assert "Access denied" in view.form.get("status")


def test_reload_rebuilds_and_keeps_cursor(make_router, server):
    router = make_router(server)
    router.handle_key("j")
    server.responses["SHOW DATABASES"] = make_result(["Database"], [("db1",), ("db2",), ("db3",)])

    router.handle_key("I")
    view = router.nav.current()
    assert view.nitems == 3
    assert view.cursor == 1
    assert view.form.items == ["db1", "db2", "db3"]


def test_no_selection_message(make_router):
    executor = FakeExecutor({"SHOW DATABASES": make_result(["Database"], [])})
    router = make_router(executor)

    router.handle_key("enter")
    assert router.nav.depth() == 1
    assert router.nav.current().form.get("status") == "No database selected."


def test_show_schema_from_tables(make_router, server):
    router = make_router(server)
    router.handle_key("enter")
    router.handle_key("s")
    view = router.nav.current()

    assert view.name == "text"
    assert view.scope == {"database": "db1", "table": "t1"}
    assert view.form.items[0] == "CREATE TABLE `t1` ("
    assert view.form.get("info") == "5 line(s)"


def test_run_loop_until_quit(make_router, server, keys):
    router = make_router(server)
    keys.extend(["j", "enter", "q", "Q", "y"])

    router.run()

    assert router.state.running is False
    assert router.nav.depth() == 1
    assert router.state.session_history == ["databases", "tables"]
    assert router.nav.stack[0].form.draws >= 3


def test_run_loop_treats_interrupt_as_quit(make_router, server, keys, monkeypatch):
    router = make_router(server)
    form = router.nav.current().form

    def interrupted(_keys):
        raise KeyboardInterrupt

    monkeypatch.setattr(form, "read_key", interrupted)
    calls = []
    monkeypatch.setattr(router, "ask", lambda msg, opts="yn": calls.append(msg) or "y")

    router.run()
    assert calls == ["Do you want to quit ([y]/n)?"]
    assert router.state.running is False


def test_close_drains_and_closes(make_router, server):
    router = make_router(server)
    router.handle_key("enter")

    router.close()
    assert router.nav.depth() == 0
    assert server.closed is True


def test_dispatch_unknown_action_is_logged(make_router, server, monkeypatch):
    from myadm.tui import router as router_module

    router = make_router(server)
    monkeypatch.delitem(router_module.ACTIONS, Action.RELOAD)
    router.dispatch(Action.RELOAD)
    assert router.nav.depth() == 1
