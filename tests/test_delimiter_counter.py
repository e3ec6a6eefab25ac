import unittest
import sys
import os
from random import Random

# Add project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ringbuf.buffer import PutMode, RingBuffer
from ringbuf.counter import DelimiterCounter

LF = 0x0A


class TestDelimiterCounter(unittest.TestCase):
    def test_invalid_delimiter(self):
        for delimiter in (-1, 256):
            with self.subTest(delimiter=delimiter):
                with self.assertRaises(ValueError):
                    DelimiterCounter(delimiter)
        with self.assertRaises(ValueError):
            RingBuffer(8, delimiter=300)

    def test_added_and_removed(self):
        counter = DelimiterCounter(LF)
        counter.added(LF)
        counter.added(0x41)
        counter.added_from(b"a\nb\n")
        self.assertEqual(counter.count, 3)
        counter.removed(0x41)
        counter.removed(LF)
        counter.removed_from(memoryview(b"\n\n"))
        self.assertEqual(counter.count, 0)

    def test_reset_and_copy(self):
        counter = DelimiterCounter(0)
        counter.added_from(bytes(4))
        clone = counter.copy()
        counter.reset()
        self.assertEqual(counter.count, 0)
        self.assertEqual(clone.count, 4)
        self.assertEqual(clone.delimiter, 0)


class TestCountingBuffer(unittest.TestCase):
    def test_put_and_get_update_count(self):
        buf = RingBuffer(8, delimiter=LF)
        self.assertEqual(buf.delimiter, LF)
        buf.put(LF)
        buf.put(0x41)
        self.assertEqual(buf.count(), 1)
        buf.put_bulk(b"\n\nx")
        self.assertEqual(buf.count(), 3)

        out = bytearray(1)
        buf.peek(out)
        self.assertEqual(buf.count(), 3)
        buf.get(out)
        self.assertEqual(buf.count(), 2)
        out = bytearray(3)
        buf.get_bulk(out)
        self.assertEqual(out, b"A\n\n")
        self.assertEqual(buf.count(), 0)

    def test_rejected_put_does_not_count(self):
        buf = RingBuffer(2, delimiter=LF)
        buf.put_bulk(b"ab")
        self.assertEqual(buf.put(LF), 0)
        self.assertEqual(buf.put_bulk(b"\n", PutMode.ALL_OR_NOTHING), 0)
        self.assertEqual(buf.count(), 0)

    def test_best_effort_counts_only_written(self):
        buf = RingBuffer(4, delimiter=LF)
        self.assertEqual(buf.put_bulk(b"ab\n\n\n\n"), 4)
        self.assertEqual(buf.count(), 2)

    def test_discard_counts_each_byte(self):
        buf = RingBuffer(8, delimiter=LF)
        buf.put_bulk(b"......")
        buf.discard(5)
        buf.put_bulk(b"\na\nb\nc")
        self.assertEqual(buf.count(), 3)
        # crosses the end of storage
        self.assertEqual(buf.discard(4), 4)
        self.assertEqual(buf.count(), 1)
        self.assertEqual(buf.read(), b"b\nc")

    def test_discard_everything_resets_count(self):
        buf = RingBuffer(8, delimiter=LF)
        buf.put_bulk(b"\n\n\n")
        self.assertEqual(buf.discard(10), 3)
        self.assertEqual(buf.count(), 0)

    def test_flush_resets_fully(self):
        buf = RingBuffer(8, delimiter=LF)
        buf.put_bulk(b"\nabc\n\n")
        buf.flush()
        self.assertTrue(buf.is_empty())
        self.assertEqual(buf.count(), 0)

    def test_randomized_consistency(self):
        """シャドウコピーとの比較でカウンタの整合性を検証する"""
        rng = Random(12345)
        capacity = 13
        buf = RingBuffer(capacity, delimiter=LF)
        shadow = bytearray()
        alphabet = (LF, LF, 0x00, 0x41, 0xFF)

        for step in range(5000):
            op = rng.randrange(7)
            if op == 0:
                element = rng.choice(alphabet)
                if buf.put(element):
                    shadow.append(element)
            elif op == 1:
                data = bytes(rng.choice(alphabet) for _ in range(rng.randint(0, capacity + 3)))
                mode = rng.choice(list(PutMode))
                n = buf.put_bulk(data, mode)
                shadow += data[:n]
            elif op == 2:
                out = bytearray(1)
                if buf.get(out):
                    self.assertEqual(out[0], shadow.pop(0))
            elif op == 3:
                out = bytearray(rng.randint(0, capacity + 3))
                n = buf.get_bulk(out)
                self.assertEqual(bytes(out[:n]), bytes(shadow[:n]))
                del shadow[:n]
            elif op == 4:
                n = buf.discard(rng.randint(0, capacity + 3))
                del shadow[:n]
            elif op == 5:
                out = bytearray(1)
                if buf.peek(out):
                    self.assertEqual(out[0], shadow[0])
            elif rng.random() < 0.2:
                buf.flush()
                shadow.clear()

            with self.subTest(step=step):
                self.assertEqual(buf.size(), len(shadow))
                self.assertEqual(buf.count(), shadow.count(LF))

        self.assertEqual(buf.read(), bytes(shadow))


if __name__ == "__main__":
    unittest.main()
