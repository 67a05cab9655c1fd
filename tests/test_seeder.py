from clinic_api.seeder import seed_demo_data


def test_seed_demo_data_creates_linked_records(store):
    summary = seed_demo_data(store, patients=8, seed=7)

    assert summary["patients"] == 8
    assert summary["visits"] == 8
    assert len(store.get_all_patients()) == 8

    for visit in store.get_all_visits():
        details = store.get_visit_with_details(visit.id)
        assert details is not None
        if visit.status == "completed":
            assert details.consultation is not None
            assert len(details.payments) == 1
        else:
            assert details.payments == []

    completed = sum(1 for v in store.get_all_visits() if v.status == "completed")
    assert summary["payments"] == completed
    assert store.get_todays_stats().total_patients == 8


def test_seed_is_reproducible(store):
    seed_demo_data(store, patients=3, seed=1)
    first = [(p.first_name, p.age) for p in store.get_all_patients()]
    store.reset()
    seed_demo_data(store, patients=3, seed=1)
    assert [(p.first_name, p.age) for p in store.get_all_patients()] == first
