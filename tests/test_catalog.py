from gymn.catalog import DomainCatalog


def test_lookups(catalog, sample_data):
    plank = sample_data["plank"]
    assert catalog.get_exercise_by_id(plank.id) == plank
    assert catalog.get_exercise_by_id("missing") is None
    assert catalog.get_workout_by_id(sample_data["workout"].id) == sample_data["workout"]
    assert [e.name for e in catalog.list_exercises()] == ["Plank", "Push-up"]
    assert [w.name for w in catalog.list_workouts()] == ["Core Day"]


def test_snapshot_until_refresh(store, catalog):
    store.add_exercise("Lunge")
    assert len(catalog.list_exercises()) == 2
    catalog.refresh()
    assert len(catalog.list_exercises()) == 3


def test_resolve_skips_missing(store, catalog, sample_data):
    ids = [sample_data["pushup"].id, "gone", sample_data["plank"].id]
    assert [e.name for e in catalog.resolve_exercises(ids)] == ["Push-up", "Plank"]


def test_search(catalog):
    assert [e.name for e in catalog.search_exercises("PUSH")] == ["Push-up"]
    assert len(catalog.search_exercises("")) == 2
    assert catalog.search_workouts("leg") == []
    assert [w.name for w in catalog.search_workouts("core")] == ["Core Day"]


def test_empty_before_refresh(store, sample_data):
    catalog = DomainCatalog(store)
    assert catalog.list_workouts() == []
    assert catalog.get_workout_by_id(sample_data["workout"].id) is None
