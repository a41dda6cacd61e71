"""
Unit tests for CurriculumRepository.

Tests:
- Current-format load and save
- Legacy (v1) upgrade
- Tolerance to malformed or foreign data
"""

import json

import pytest

from questcore.core.subjects import CurriculumGrade, CurriculumSubject
from questcore.curriculum import CurriculumRepository, CurriculumState, InMemoryKeyValueStore, LevelRecord
from questcore.curriculum.storage import CURRENT_KEY, LEGACY_KEY

MATH = CurriculumSubject.MATH
LANGUAGE = CurriculumSubject.LANGUAGE


def repository_with(catalog, **entries):
    store = InMemoryKeyValueStore({key: json.dumps(value) for key, value in entries.items()})
    return CurriculumRepository(store, catalog), store


class TestLoad:
    def test_empty_store_gives_initial_state(self, catalog):
        repository, _ = repository_with(catalog)
        state = repository.load()
        assert state.highest_unlocked_index == {subject: 0 for subject in catalog.subjects}
        assert state.placement_grade is None
        assert all(records == {} for records in state.level_records.values())

    def test_current_format(self, catalog):
        repository, _ = repository_with(
            catalog,
            **{
                CURRENT_KEY: {
                    "highestUnlockedIndex": {"math": 2, "language": 1},
                    "placementGradeRaw": "grade1",
                    "levelRecords": {
                        "math": {"math-preK": {"attempts": 3, "bestCompletedQuestCount": 1, "assistedUnlock": True}}
                    },
                }
            },
        )
        state = repository.load()
        assert state.cursor(MATH) == 2
        assert state.cursor(LANGUAGE) == 1
        assert state.cursor(CurriculumSubject.SCIENCE) == 0
        assert state.placement_grade is CurriculumGrade.GRADE1
        assert state.level_records[MATH]["math-preK"] == LevelRecord(3, 1, True)

    def test_current_key_wins_over_legacy(self, catalog):
        repository, _ = repository_with(
            catalog,
            **{
                CURRENT_KEY: {"highestUnlockedIndex": {"math": 5}},
                LEGACY_KEY: {"highestUnlockedIndex": {"math": 1}},
            },
        )
        assert repository.load().cursor(MATH) == 5


class TestLegacyUpgrade:
    def test_legacy_blob_loads_with_empty_records(self, catalog):
        repository, store = repository_with(
            catalog,
            **{LEGACY_KEY: {"highestUnlockedIndex": {"math": 3, "science": 2}, "placementGradeRaw": "grade2"}},
        )
        state = repository.load()

        assert state.cursor(MATH) == 3
        assert state.cursor(CurriculumSubject.SCIENCE) == 2
        assert state.placement_grade is CurriculumGrade.GRADE2
        assert all(records == {} for records in state.level_records.values())
        assert CURRENT_KEY not in store.entries

    def test_save_writes_current_key_only(self, catalog):
        repository, store = repository_with(catalog, **{LEGACY_KEY: {"highestUnlockedIndex": {"math": 3}}})
        legacy_raw = store.entries[LEGACY_KEY]

        repository.save(repository.load())

        assert json.loads(store.entries[CURRENT_KEY])["highestUnlockedIndex"]["math"] == 3
        assert store.entries[LEGACY_KEY] == legacy_raw


class TestMalformedData:
    """Bad stored data is dropped piecemeal, never fatal."""

    def test_unknown_subject_ignored(self, catalog):
        repository, _ = repository_with(
            catalog, **{CURRENT_KEY: {"highestUnlockedIndex": {"math": 1, "art": 4}, "levelRecords": {"art": {}}}}
        )
        state = repository.load()
        assert state.cursor(MATH) == 1
        assert set(state.highest_unlocked_index) == set(catalog.subjects)

    def test_unknown_level_id_dropped(self, catalog):
        repository, _ = repository_with(
            catalog,
            **{
                CURRENT_KEY: {
                    "levelRecords": {
                        "math": {
                            "math-grade9": {"attempts": 1},
                            "science-preK": {"attempts": 1},
                            "math-grade1": {"attempts": 2},
                        }
                    }
                }
            },
        )
        records = repository.load().level_records[MATH]
        assert set(records) == {"math-grade1"}
        assert records["math-grade1"].attempts == 2

    def test_malformed_record_dropped(self, catalog):
        repository, _ = repository_with(
            catalog,
            **{
                CURRENT_KEY: {
                    "levelRecords": {
                        "math": {"math-preK": {"attempts": "lots"}, "math-grade1": {"attempts": -1}},
                        "language": ["not", "a", "dict"],
                    }
                }
            },
        )
        state = repository.load()
        assert state.level_records[MATH] == {}
        assert state.level_records[LANGUAGE] == {}

    def test_cursor_clamped_and_non_integer_ignored(self, catalog):
        repository, _ = repository_with(
            catalog,
            **{CURRENT_KEY: {"highestUnlockedIndex": {"math": 99, "language": -3, "science": "two", "values": True}}},
        )
        state = repository.load()
        assert state.cursor(MATH) == len(catalog.levels(MATH))
        assert state.cursor(LANGUAGE) == 0
        assert state.cursor(CurriculumSubject.SCIENCE) == 0
        assert state.cursor(CurriculumSubject.VALUES) == 0

    def test_unknown_placement_grade_dropped(self, catalog):
        repository, _ = repository_with(catalog, **{CURRENT_KEY: {"placementGradeRaw": "grade12"}})
        assert repository.load().placement_grade is None

    def test_unparsable_blob_falls_back_to_legacy(self, catalog):
        store = InMemoryKeyValueStore(
            {CURRENT_KEY: "{not json", LEGACY_KEY: json.dumps({"highestUnlockedIndex": {"math": 2}})}
        )
        assert CurriculumRepository(store, catalog).load().cursor(MATH) == 2

    @pytest.mark.parametrize("raw", ["[]", "null", "42", '{"highestUnlockedIndex": "nope"}'])
    def test_wrong_shapes_give_initial_state(self, catalog, raw):
        store = InMemoryKeyValueStore({CURRENT_KEY: raw})
        state = CurriculumRepository(store, catalog).load()
        assert state == CurriculumState.initial(catalog.subjects)


class TestSave:
    def test_blob_uses_stored_field_names(self, catalog):
        repository, store = repository_with(catalog)
        state = CurriculumState.initial(catalog.subjects)
        state.highest_unlocked_index[MATH] = 1
        state.placement_grade = CurriculumGrade.PRE_K
        state.record_for(MATH, "math-preK").register_attempt(2, assisted=True)

        repository.save(state)

        blob = json.loads(store.entries[CURRENT_KEY])
        assert blob["highestUnlockedIndex"]["math"] == 1
        assert blob["placementGradeRaw"] == "preK"
        assert blob["levelRecords"]["math"]["math-preK"] == {
            "attempts": 1,
            "bestCompletedQuestCount": 2,
            "assistedUnlock": True,
        }

    def test_round_trip(self, catalog):
        repository, _ = repository_with(catalog)
        state = CurriculumState.initial(catalog.subjects)
        state.highest_unlocked_index[LANGUAGE] = 4
        state.record_for(LANGUAGE, "language-grade3").register_attempt(1)
        repository.save(state)
        assert repository.load() == state
