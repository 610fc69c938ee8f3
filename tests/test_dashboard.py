"""Tests for ui.dashboard -- table state and histogram rendering."""

import unittest

from netquality.latency import Sample
from netquality.orchestrator import PhaseEvent, PhaseStatus
from netquality.stats import aggregate
from netquality.targets import Target, default_targets
from ui.dashboard import ProgressDisplay, TargetBoard, create_histogram


class TestCreateHistogram(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(create_histogram([]), "No data")

    def test_one_bar_per_value(self):
        bars = create_histogram([1.0, 5.0, 10.0])
        self.assertEqual(len(bars), 3)
        self.assertEqual(bars[0], "▁")
        self.assertEqual(bars[-1], "█")

    def test_flat(self):
        self.assertEqual(create_histogram([4.0, 4.0]), "▁▁")


class TestTargetBoard(unittest.TestCase):
    def setUp(self):
        self.targets = default_targets()
        self.board = TargetBoard(self.targets)

    def test_initial_rows(self):
        table = self.board.render()
        self.assertEqual(table.row_count, 2)

    def test_testing_then_complete(self):
        google = self.targets[0]
        self.board.update(google, PhaseEvent(google, PhaseStatus.TESTING))
        self.assertIn("Pinging", self.board._cells[google])

        result = aggregate([Sample(latency_ms=20.0), Sample(latency_ms=22.0)])
        self.board.update(google, PhaseEvent(google, PhaseStatus.COMPLETE, result))
        self.assertIn("21 ms", self.board._cells[google])
        self.assertEqual(self.board._samples[google], [20.0, 22.0])

    def test_targets_sharing_a_host_keep_separate_rows(self):
        a = Target.from_spec("A=http://10.0.0.1/a")
        b = Target.from_spec("B=http://10.0.0.1/b")
        board = TargetBoard([a, b])
        self.assertEqual(len(board._cells), 2)

        board.update(a, PhaseEvent(a, PhaseStatus.COMPLETE, aggregate([Sample(latency_ms=10.0)])))
        board.update(b, PhaseEvent(b, PhaseStatus.COMPLETE, aggregate([Sample.failed("x")])))
        self.assertIn("10 ms", board._cells[a])
        self.assertIn("Failed", board._cells[b])
        self.assertEqual(board._samples[a], [10.0])

    def test_failed_round(self):
        cf = self.targets[1]
        result = aggregate([Sample.failed("x")] * 4)
        self.board.update(cf, PhaseEvent(cf, PhaseStatus.COMPLETE, result))
        self.assertIn("Failed", self.board._cells[cf])
        self.assertIn("100% packet loss", self.board._cells[cf])


class TestProgressDisplay(unittest.TestCase):
    def test_phase_start_creates_task(self):
        display = ProgressDisplay()
        display.update("Download", None)
        display.update("Download", 120.0)
        task = display.progress.tasks[0]
        self.assertEqual(task.description, "Download")
        self.assertEqual(task.completed, 120.0)
        self.assertEqual(task.fields["speed"], "120.00 Mbps")

    def test_final_tick_always_shown(self):
        display = ProgressDisplay()
        display.update("Upload", None)
        display.update("Upload", 44.5)
        display.update("Upload", 45.0)
        task = display.progress.tasks[0]
        self.assertEqual(task.completed, 45.0)
        self.assertEqual(task.fields["speed"], "45.00 Mbps")

    def test_each_phase_has_its_own_scale(self):
        display = ProgressDisplay()
        display.update("Download", 800.0)
        display.update("Upload", 40.0)
        download, upload = display.progress.tasks
        self.assertEqual(download.total, 800.0)
        self.assertEqual(upload.total, 40.0)
        self.assertEqual(upload.percentage, 100.0)


if __name__ == "__main__":
    unittest.main()
