from clientdb.database.init_db import create_tables, initialize_database, seed_sample_data


def test_seed_sample_data_runs_demo_scenario(repo):
    ids = seed_sample_data(repo)
    ivan = ids["ivan@example.com"]

    records = repo.find_clients().group()
    assert len(records) == 1
    assert records[0].client_id == ivan
    assert records[0].email == "ivan.new@example.com"
    assert records[0].first_name == "Иван"
    assert records[0].phones == {"+79111234567"}


def test_seed_sample_data_twice_skips(repo, capsys):
    seed_sample_data(repo)
    ids = seed_sample_data(repo)

    assert ids == {}
    assert len(repo.find_clients().group()) == 1
    assert "already present" in capsys.readouterr().out


def test_reset_drops_data(repo, ivan):
    create_tables(repo, reset=True)
    assert repo.find_clients().all() == []


def test_initialize_database_prints_status(session_factory, capsys):
    from clientdb.repositories import ClientRepository

    initialize_database(sample_data=True, repo=ClientRepository(session_factory))
    out = capsys.readouterr().out

    assert "Clients: 1" in out
    assert "Phones:  1" in out
    assert "ivan.new@example.com" in out
