import os
import tempfile
import unittest
from unittest import mock

from planesom.cli import main, parse_args
from planesom.visualization import SnapshotRenderer


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.points_path = os.path.join(self.tmp.name, "points.txt")
        with open(self.points_path, "w") as f:
            f.write("5 5\n-40 20\n30 -70\n")

    def test_defaults(self):
        args = parse_args([])
        self.assertEqual(args.points, "points.txt")
        self.assertEqual((args.rows, args.cols), (10, 10))
        self.assertEqual(args.initial_lr, 0.4)
        self.assertEqual(args.initial_radius, 6.1)
        self.assertEqual(args.lr_threshold, 0.001)
        self.assertIsNone(args.snapshot_every)
        self.assertTrue(args.render)

    def test_train_and_render(self):
        out_root = os.path.join(self.tmp.name, "out")
        code = main([
            "--points", self.points_path,
            "--rows", "3", "--cols", "3",
            "--low", "-90", "--high", "90", "--cell-size", "60",
            "--max-epochs", "2",
            "--snapshot-every", "3",
            "--output-root", out_root,
            "--no-logging", "--no-progress",
        ])
        self.assertEqual(code, 0)

        plot_dirs = os.listdir(out_root)
        self.assertEqual(len(plot_dirs), 1)
        self.assertTrue(plot_dirs[0].startswith("plots_"))
        files = set(os.listdir(os.path.join(out_root, plot_dirs[0])))
        self.assertEqual(files, {"e0_plot1.png", "e0_plot2_i3.png", "e1_plot2_i3.png", "e2_final.png"})

    def test_random_init_without_rendering(self):
        code = main([
            "--points", self.points_path,
            "--init", "random", "--seed", "3",
            "--rows", "2", "--cols", "2",
            "--max-epochs", "1",
            "--no-render", "--no-logging", "--no-progress",
        ])
        self.assertEqual(code, 0)

    def test_missing_points_file(self):
        code = main([
            "--points", os.path.join(self.tmp.name, "absent.txt"),
            "--no-render", "--no-logging", "--no-progress",
        ])
        self.assertEqual(code, 1)

    def test_invalid_trainer_arguments_leave_no_output(self):
        out_root = os.path.join(self.tmp.name, "out")
        code = main([
            "--points", self.points_path,
            "--snapshot-every", "0",
            "--output-root", out_root,
            "--no-logging", "--no-progress",
        ])
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(out_root))

    def test_negative_radius_rejected(self):
        code = main([
            "--points", self.points_path,
            "--initial-radius", "-2",
            "--no-render", "--no-logging", "--no-progress",
        ])
        self.assertEqual(code, 1)

    def test_final_render_failure_is_reported(self):
        out_root = os.path.join(self.tmp.name, "out")
        with mock.patch.object(SnapshotRenderer, "render_final", side_effect=OSError("disk full")):
            code = main([
                "--points", self.points_path,
                "--rows", "2", "--cols", "2",
                "--max-epochs", "1",
                "--output-root", out_root,
                "--no-logging", "--no-progress",
            ])
        self.assertEqual(code, 1)

    def test_invalid_grid(self):
        code = main([
            "--points", self.points_path,
            "--rows", "0",
            "--no-render", "--no-logging", "--no-progress",
        ])
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
