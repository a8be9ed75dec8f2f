import os
import tempfile
import unittest
from datetime import datetime

import torch

from planesom import Grid, Lattice, Trainer
from planesom.visualization import SnapshotRenderer, make_output_dir, render_som

PNG_MAGIC = b"\x89PNG"


class TestRendering(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.grid = Grid(3, 3, init=Lattice(low=-90.0, high=90.0, cell_size=60.0))
        self.points = torch.tensor([[5.0, 5.0], [-40.0, 20.0], [30.0, -70.0]], dtype=torch.float64)

    def assertPng(self, path):
        self.assertTrue(os.path.exists(path), f"{path} was not written")
        with open(path, "rb") as f:
            self.assertEqual(f.read(4), PNG_MAGIC)

    def test_render_som(self):
        path = os.path.join(self.tmp.name, "state.png")
        render_som(self.grid.get_weights(), self.points, path, bounds=(-90.0, 90.0), point=(5.0, 5.0), winner=(1, 1))
        self.assertPng(path)

    def test_make_output_dir(self):
        out_dir = make_output_dir(self.tmp.name, now=datetime(2024, 1, 2, 3, 4, 5))
        self.assertEqual(out_dir.name, "plots_20240102-030405")
        self.assertTrue(out_dir.is_dir())
        with self.assertRaises(FileExistsError):
            make_output_dir(self.tmp.name, now=datetime(2024, 1, 2, 3, 4, 5))

    def test_snapshot_renderer_file_names(self):
        renderer = SnapshotRenderer(self.tmp.name, self.points, bounds=(-90.0, 90.0), render_epochs=True)
        renderer.render_initial(self.grid)
        trainer = Trainer(self.grid, self.points, snapshot_hook=renderer, snapshot_every=2)
        trainer.train(max_epochs=1)

        names = [p.name for p in renderer.written]
        self.assertEqual(names, ["e0_plot1.png", "e0_plot2_i2.png", "e0_plot3.png"])
        for path in renderer.written:
            self.assertPng(path)

    def test_epoch_snapshots_skipped_by_default(self):
        renderer = SnapshotRenderer(self.tmp.name, self.points, bounds=(-90.0, 90.0))
        Trainer(self.grid, self.points, snapshot_hook=renderer).train(max_epochs=2)
        self.assertEqual(renderer.written, [])
        final = renderer.render_final(self.grid, 2)
        self.assertEqual(final.name, "e2_final.png")
        self.assertPng(final)


if __name__ == '__main__':
    unittest.main()
