from devbootstrap.config import DEFAULT_PREFERENCES
from devbootstrap.steps import PreferencesStep


def _store_from_calls(argvs):
    store = {}
    for argv in argvs:
        if argv[:2] == ["defaults", "write"]:
            _, _, domain, key, vtype, value = argv
            store[(domain, key)] = (vtype, value)
    return store


def test_writes_every_preference_and_restarts_services(make_session, runner):
    PreferencesStep().run(make_session())

    writes = runner.called("defaults", "write")
    assert len(writes) == len(DEFAULT_PREFERENCES)
    assert ["defaults", "write", "com.apple.dock", "showDesktopGestureEnabled", "-bool", "false"] in writes
    assert ["defaults", "write", "NSGlobalDomain", "ContextMenuGesture", "-int", "1"] in writes
    assert [a[1] for a in runner.called("killall")] == ["cfprefsd", "SystemUIServer", "Dock"]


def test_rerun_yields_same_values(make_session, runner):
    step = PreferencesStep()
    sess = make_session()

    step.run(sess)
    once = _store_from_calls(runner.argvs)
    step.run(sess)
    twice = _store_from_calls(runner.argvs)

    assert once == twice
    assert once[("com.apple.AppleMultitouchTrackpad", "TrackpadCornerSecondaryClick")] == ("-int", "2")


def test_restart_failure_is_not_fatal(make_session, runner):
    runner.on(["killall"], returncode=1)
    PreferencesStep().run(make_session())
    assert len(runner.called("killall")) == 3


def test_failed_write_does_not_stop_remaining_writes(make_session, runner):
    runner.on(["defaults", "write", "NSGlobalDomain"], returncode=1)
    PreferencesStep().run(make_session())
    assert len(runner.called("defaults", "write")) == len(DEFAULT_PREFERENCES)


def test_custom_preference_table(make_session, runner):
    sess = make_session(
        preferences=[{"domain": "com.apple.finder", "key": "AppleShowAllFiles", "type": "bool", "value": "yes"}],
        restart_services=["Finder"],
    )
    PreferencesStep().run(sess)
    assert runner.argvs == [
        ["defaults", "write", "com.apple.finder", "AppleShowAllFiles", "-bool", "true"],
        ["killall", "Finder"],
    ]
