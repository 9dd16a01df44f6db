from conftest import make_exe

from devbootstrap.steps import InstallToolsStep


def test_batch_install_of_formulae(make_session, runner):
    InstallToolsStep().run(make_session(casks=[], command_aliases={}))
    assert runner.called("brew", "install") == [["brew", "install", "git", "python", "node", "gh"]]


def test_batch_failure_falls_back_to_one_by_one(make_session, runner):
    runner.on(["brew", "install", "git", "python"], returncode=1)
    runner.on(["brew", "install", "python"], returncode=1)
    InstallToolsStep().run(make_session(casks=[], command_aliases={}))

    singles = [a for a in runner.called("brew", "install") if len(a) == 3]
    assert singles == [
        ["brew", "install", "git"],
        ["brew", "install", "python"],
        ["brew", "install", "node"],
        ["brew", "install", "gh"],
    ]


def test_app_in_applications_dir_is_not_installed(tmp_path, make_session, runner):
    (tmp_path / "Applications" / "Spotify.app").mkdir(parents=True)
    runner.on(["brew", "list", "--cask"], returncode=1)
    sess = make_session(
        formulae=[],
        command_aliases={},
        casks=[{"token": "spotify", "app": "Spotify"}, {"token": "chatgpt", "app": "ChatGPT"}],
    )

    InstallToolsStep().run(sess)

    installs = runner.called("brew", "install", "--cask")
    assert installs == [["brew", "install", "--cask", "chatgpt", "--no-quarantine"]]
    assert ["brew", "list", "--cask", "spotify"] not in runner.argvs


def test_cask_registered_with_brew_is_not_installed(make_session, runner):
    sess = make_session(formulae=[], command_aliases={}, casks=[{"token": "spotify", "app": "Spotify"}])
    InstallToolsStep().run(sess)
    assert runner.called("brew", "install", "--cask") == []


def test_cask_failure_does_not_stop_others(make_session, runner):
    runner.on(["brew", "list", "--cask"], returncode=1)
    runner.on(["brew", "install", "--cask", "chatgpt"], returncode=1)
    InstallToolsStep().run(make_session(formulae=[], command_aliases={}))
    tokens = [a[3] for a in runner.called("brew", "install", "--cask")]
    assert tokens == ["visual-studio-code", "chatgpt", "spotify"]


def test_quiet_brew_env_only_during_stage(make_session, runner):
    sess = make_session(casks=[], command_aliases={})
    InstallToolsStep().run(sess)

    _, kwargs = runner.calls[0]
    assert kwargs["env"]["HOMEBREW_NO_AUTO_UPDATE"] == "1"
    assert "HOMEBREW_NO_INSTALL_CLEANUP" not in sess.env


def test_python_alias_linked_when_missing(tmp_path, bin_dir, make_session, runner):
    python3 = make_exe(bin_dir, "python3")
    InstallToolsStep().run(make_session(formulae=[], casks=[]))
    assert runner.called("ln") == [["ln", "-sf", str(python3), str(tmp_path / "usr-local-bin" / "python")]]


def test_alias_left_alone_when_present(bin_dir, make_session, runner):
    make_exe(bin_dir, "python3")
    make_exe(bin_dir, "python")
    InstallToolsStep().run(make_session(formulae=[], casks=[]))
    assert runner.called("ln") == []
    assert runner.called("sudo") == []


def test_alias_uses_sudo_by_default(bin_dir, make_session, runner):
    make_exe(bin_dir, "python3")
    InstallToolsStep().run(make_session(formulae=[], casks=[], link_with_sudo=True))
    assert runner.called("sudo", "ln", "-sf")


def test_dry_run_still_checks_cask_registry(make_session, runner):
    sess = make_session(formulae=[], command_aliases={}, casks=[{"token": "spotify", "app": "Spotify"}])
    sess.dry_run = True

    InstallToolsStep().run(sess)

    listing = [kw for argv, kw in runner.calls if argv[:3] == ["brew", "list", "--cask"]]
    assert listing[0]["dry_run"] is False
    assert runner.called("brew", "install", "--cask") == []
