import pickle
from functools import cmp_to_key
from unittest import TestCase

from immutablecollections import immutabledict

from rangeutils.range import OutOfViewBoundsError, Range
from rangeutils.range_map import (
    ImmutableRangeMap,
    MutableRangeMap,
    RangeMap,
    immutablerangemap,
    mutablerangemap,
)


class TestRangeMap(TestCase):
    def test_empty(self):
        self.assertFalse(0 in immutablerangemap())
        self.assertTrue(immutablerangemap().is_empty())
        self.assertTrue(RangeMap.create_mutable().is_empty())
        self.assertIsNone(immutablerangemap().span())
        self.assertEqual(0, len(mutablerangemap()))

    def test_lookup(self):
        range_map = (
            ImmutableRangeMap.builder()
            .put(Range.closed(0, 2), "foo")
            .put(Range.open_closed(6, 8), "bar")
            .build()
        )
        self.assertEqual("foo", range_map[0])
        self.assertEqual("foo", range_map[1])
        self.assertEqual("foo", range_map[2])
        self.assertEqual(None, range_map[6])
        self.assertEqual("bar", range_map[7])
        self.assertEqual("bar", range_map[8])
        self.assertEqual(None, range_map[9])
        self.assertEqual("bar", range_map.get(7))
        self.assertIsNone(range_map.get(9))
        self.assertTrue(7 in range_map)
        self.assertFalse(6 in range_map)
        self.assertEqual((Range.open_closed(6, 8), "bar"), range_map.get_entry(8))
        self.assertIsNone(range_map.get_entry(4))

    def test_put_overwrites_overlap(self):
        range_map: MutableRangeMap[int, str] = RangeMap.create_mutable()
        range_map.put(Range.closed(1, 10), "a")
        range_map.put(Range.open(3, 6), "b")
        self.assertEqual(
            immutabledict(
                [
                    (Range.closed(1, 3), "a"),
                    (Range.open(3, 6), "b"),
                    (Range.closed(6, 10), "a"),
                ]
            ),
            range_map.as_map_of_ranges(),
        )
        self.assertEqual("a", range_map[3])
        self.assertEqual("b", range_map[4])
        self.assertEqual("a", range_map[6])

    def test_adjacent_equal_values_not_merged(self):
        range_map = mutablerangemap([(Range.closed(1, 10), "a")])
        range_map.put(Range.open_closed(10, 20), "a")
        self.assertEqual(2, len(range_map))
        self.assertEqual(
            [Range.closed(1, 10), Range.open_closed(10, 20)],
            list(range_map.as_map_of_ranges().keys()),
        )

    def test_put_spanning_several_entries(self):
        range_map = mutablerangemap(
            [
                (Range.closed(1, 3), "a"),
                (Range.closed(5, 7), "b"),
                (Range.closed(9, 11), "c"),
            ]
        )
        range_map.put(Range.open(2, 10), "d")
        self.assertEqual(
            immutabledict(
                [
                    (Range.closed(1, 2), "a"),
                    (Range.open(2, 10), "d"),
                    (Range.closed(10, 11), "c"),
                ]
            ),
            range_map.as_map_of_ranges(),
        )

    def test_put_exactly_replaces(self):
        range_map = mutablerangemap([(Range.closed(1, 3), "a")])
        range_map.put(Range.closed(1, 3), "b")
        self.assertEqual(
            immutabledict([(Range.closed(1, 3), "b")]), range_map.as_map_of_ranges()
        )

    def test_put_empty_is_noop(self):
        range_map = mutablerangemap([(Range.closed(1, 3), "a")])
        range_map.put(Range.open(2, 2), "b")
        self.assertEqual(
            immutabledict([(Range.closed(1, 3), "a")]), range_map.as_map_of_ranges()
        )

    def test_put_rejects_none(self):
        range_map = mutablerangemap()
        with self.assertRaises(ValueError):
            range_map.put(Range.closed(1, 3), None)
        with self.assertRaises(ValueError):
            range_map.put(None, "a")

    def test_remove_trims(self):
        range_map = mutablerangemap(
            [
                (Range.closed(1, 3), "a"),
                (Range.open(3, 6), "b"),
                (Range.closed(6, 10), "a"),
                (Range.open_closed(10, 20), "a"),
            ]
        )
        range_map.remove(Range.closed(5, 11))
        self.assertEqual(
            immutabledict(
                [
                    (Range.closed(1, 3), "a"),
                    (Range.open(3, 5), "b"),
                    (Range.open_closed(11, 20), "a"),
                ]
            ),
            range_map.as_map_of_ranges(),
        )

    def test_remove_splits_entry(self):
        range_map = mutablerangemap([(Range.all(), "x")])
        range_map.remove(Range.closed(3, 5))
        self.assertEqual(
            immutabledict([(Range.less_than(3), "x"), (Range.greater_than(5), "x")]),
            range_map.as_map_of_ranges(),
        )
        range_map.remove(Range.open(2, 2))
        self.assertEqual(2, len(range_map))

    def test_clear(self):
        range_map = mutablerangemap([(Range.closed(1, 3), "a"), (Range.closed(5, 7), "b")])
        range_map.clear()
        self.assertTrue(range_map.is_empty())

    def test_span(self):
        range_map = mutablerangemap(
            [(Range.open(3, 7), "1"), (Range.closed(9, 10), "2"), (Range.closed(12, 16), "3")]
        )
        self.assertEqual(Range.open_closed(3, 16), range_map.span())

    def test_put_all_sources(self):
        range_map = mutablerangemap()
        range_map.put_all({Range.closed(1, 2): "a"})
        range_map.put_all([(Range.closed(4, 5), "b")])
        range_map.put_all(immutablerangemap([(Range.closed(7, 8), "c")]))
        self.assertEqual(3, len(range_map))
        self.assertEqual("c", range_map[8])

    def test_sub_range_map(self):
        range_map = mutablerangemap(
            [(Range.open(3, 7), "1"), (Range.closed(9, 10), "2"), (Range.closed(12, 16), "3")]
        )
        sub = range_map.sub_range_map(Range.closed(5, 11))
        self.assertEqual(
            immutabledict([(Range.closed_open(5, 7), "1"), (Range.closed(9, 10), "2")]),
            sub.as_map_of_ranges(),
        )
        self.assertEqual(2, len(sub))
        self.assertEqual(Range.closed(5, 10), sub.span())
        self.assertEqual((Range.closed_open(5, 7), "1"), sub.get_entry(6))
        self.assertIsNone(sub.get_entry(4))
        self.assertIsNone(sub.get(12))
        self.assertFalse(8 in sub)

    def test_sub_range_map_write_through(self):
        range_map = mutablerangemap(
            [(Range.open(3, 7), "1"), (Range.closed(9, 10), "2"), (Range.closed(12, 16), "3")]
        )
        sub = range_map.sub_range_map(Range.closed(5, 11))
        sub.put(Range.closed(7, 9), "4")
        self.assertEqual(
            immutabledict(
                [
                    (Range.open(3, 7), "1"),
                    (Range.closed(7, 9), "4"),
                    (Range.open_closed(9, 10), "2"),
                    (Range.closed(12, 16), "3"),
                ]
            ),
            range_map.as_map_of_ranges(),
        )
        self.assertEqual(
            immutabledict(
                [
                    (Range.closed_open(5, 7), "1"),
                    (Range.closed(7, 9), "4"),
                    (Range.open_closed(9, 10), "2"),
                ]
            ),
            sub.as_map_of_ranges(),
        )

        with self.assertRaises(OutOfViewBoundsError):
            sub.put(Range.open(9, 12), "5")
        with self.assertRaises(OutOfViewBoundsError):
            sub.remove(Range.closed(0, 6))

        sub.clear()
        self.assertEqual(
            immutabledict([(Range.open(3, 5), "1"), (Range.closed(12, 16), "3")]),
            range_map.as_map_of_ranges(),
        )
        self.assertTrue(sub.is_empty())

    def test_sub_range_map_sees_later_parent_changes(self):
        range_map = mutablerangemap([(Range.closed(1, 3), "a")])
        sub = range_map.sub_range_map(Range.closed(2, 8))
        range_map.put(Range.closed(5, 6), "b")
        self.assertEqual("b", sub[5])
        range_map.remove(Range.all())
        self.assertTrue(sub.is_empty())

    def test_nested_sub_range_map(self):
        range_map = mutablerangemap(
            [(Range.open(3, 7), "1"), (Range.closed(9, 10), "2"), (Range.closed(12, 16), "3")]
        )
        nested = range_map.sub_range_map(Range.closed(5, 11)).sub_range_map(
            Range.closed(6, 20)
        )
        self.assertEqual(
            immutabledict([(Range.closed_open(6, 7), "1"), (Range.closed(9, 10), "2")]),
            nested.as_map_of_ranges(),
        )
        with self.assertRaises(OutOfViewBoundsError):
            nested.put(Range.closed(10, 12), "x")
        nested.remove(Range.closed(6, 11))
        self.assertEqual(
            immutabledict([(Range.open(3, 6), "1"), (Range.closed(12, 16), "3")]),
            range_map.as_map_of_ranges(),
        )

        disjoint = range_map.sub_range_map(Range.closed(5, 11)).sub_range_map(
            Range.closed(20, 30)
        )
        self.assertTrue(disjoint.is_empty())
        with self.assertRaises(OutOfViewBoundsError):
            disjoint.put(Range.closed(21, 22), "x")

    def test_immutable_mutators_return_new_maps(self):
        base = immutablerangemap([(Range.closed(1, 10), "a")])
        updated = base.put(Range.open(3, 6), "b")
        self.assertIsInstance(updated, ImmutableRangeMap)
        self.assertEqual(
            immutabledict([(Range.closed(1, 10), "a")]), base.as_map_of_ranges()
        )
        self.assertEqual(3, len(updated))

        removed = updated.remove(Range.closed(1, 10))
        self.assertTrue(removed.is_empty())
        self.assertEqual(3, len(updated))

        self.assertEqual(2, len(base.put_all({Range.closed(20, 30): "c"})))
        self.assertEqual(1, len(base))

    def test_immutable_sub_range_map(self):
        base = immutablerangemap([(Range.closed(1, 10), "a")])
        sub = base.sub_range_map(Range.open(5, 20))
        self.assertIsInstance(sub, ImmutableRangeMap)
        self.assertEqual(
            immutabledict([(Range.open_closed(5, 10), "a")]), sub.as_map_of_ranges()
        )

    def test_builder_later_puts_overwrite(self):
        range_map = (
            ImmutableRangeMap.builder()
            .put(Range.closed(0, 2), "foo")
            .put(Range.closed(1, 3), "bar")
            .build()
        )
        self.assertEqual(
            immutabledict([(Range.closed_open(0, 1), "foo"), (Range.closed(1, 3), "bar")]),
            range_map.as_map_of_ranges(),
        )
        self.assertEqual(
            range_map,
            ImmutableRangeMap.builder()
            .put_all([(Range.closed(0, 2), "foo"), (Range.closed(1, 3), "bar")])
            .build(),
        )

    def test_factories(self):
        base = immutablerangemap([(Range.closed(1, 3), "a")])
        self.assertIs(base, immutablerangemap(base))
        copy = mutablerangemap(base)
        copy.put(Range.closed(5, 6), "b")
        self.assertEqual(1, len(base))
        self.assertEqual(2, len(copy))

    def test_equality(self):
        mutable = mutablerangemap([(Range.closed(1, 3), "a")])
        immutable = immutablerangemap([(Range.closed(1, 3), "a")])
        self.assertEqual(mutable, immutable)
        self.assertEqual(hash(mutable), hash(immutable))
        self.assertNotEqual(mutable, immutablerangemap([(Range.closed(1, 3), "b")]))
        self.assertNotEqual(mutable, {Range.closed(1, 3): "a"})

    def test_repr(self):
        self.assertEqual(
            "MutableRangeMap({[1..3]: 'a'})",
            repr(mutablerangemap([(Range.closed(1, 3), "a")])),
        )
        self.assertEqual(
            "ImmutableRangeMap({(1..3): 'a'})",
            repr(immutablerangemap([(Range.open(1, 3), "a")])),
        )

    def test_custom_ordering(self):
        descending = cmp_to_key(lambda a, b: b - a)
        range_map = mutablerangemap()
        range_map.put(Range.closed(descending(10), descending(1)), "a")
        range_map.put(Range.open(descending(6), descending(4)), "b")
        self.assertEqual(
            [
                Range.closed(descending(10), descending(6)),
                Range.open(descending(6), descending(4)),
                Range.closed(descending(4), descending(1)),
            ],
            list(range_map.as_map_of_ranges().keys()),
        )
        self.assertEqual("b", range_map[descending(5)])
        self.assertEqual("a", range_map[descending(7)])
        self.assertEqual("a", range_map[descending(4)])
        self.assertIsNone(range_map[descending(11)])

        range_map.remove(Range.closed(descending(3), descending(2)))
        self.assertEqual(4, len(range_map))
        self.assertIsNone(range_map[descending(3)])
        self.assertEqual(
            (Range.open_closed(descending(2), descending(1)), "a"),
            range_map.get_entry(descending(1)),
        )

        sub = range_map.sub_range_map(Range.closed(descending(8), descending(5)))
        sub.put(Range.closed(descending(8), descending(7)), "c")
        self.assertEqual("c", range_map[descending(8)])
        with self.assertRaises(OutOfViewBoundsError):
            sub.put(Range.closed(descending(9), descending(7)), "d")

        immutable = immutablerangemap(range_map)
        self.assertEqual(range_map, immutable)
        self.assertEqual(hash(range_map), hash(immutable))

    def test_trimming_is_logged(self):
        range_map = mutablerangemap([(Range.closed(1, 10), "a")])
        with self.assertLogs("rangeutils.range_map", level="DEBUG") as logs:
            range_map.put(Range.closed(5, 15), "b")
        self.assertIn("Trimming", logs.output[0])

    def test_pickling(self):
        entries = [(Range.closed(0, 2), "a"), (Range.open(5, 29), "b")]
        for range_map in (
            mutablerangemap(),
            immutablerangemap(),
            mutablerangemap(entries),
            immutablerangemap(entries),
        ):
            restored = pickle.loads(pickle.dumps(range_map))
            self.assertEqual(range_map, restored)
            self.assertIs(
                isinstance(range_map, ImmutableRangeMap),
                isinstance(restored, ImmutableRangeMap),
            )
