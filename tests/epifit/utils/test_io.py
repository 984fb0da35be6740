########################################################################################
##
##                                  TESTS FOR
##                                'utils/io.py'
##
########################################################################################

# IMPORTS ==============================================================================

import os
import tempfile
import unittest

import numpy as np

from epifit.utils import read_parameters, read_observations, save_results
from epifit.exceptions import PreconditionViolation


# TESTS ================================================================================

class TestReadParameters(unittest.TestCase):
    """
    Test reading parameter files in 'beta mu gamma alpha delta [S0 I0]' order
    """

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "parameters.in")

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, text):
        with open(self.path, "w") as file:
            file.write(text)


    def test_with_initial_conditions(self):

        self._write("0.6 0.05 0.12 0.04 0.15 980 20\n")
        params, initial = read_parameters(self.path)

        np.testing.assert_array_equal(params, [0.04, 0.6, 0.12, 0.15, 0.05])
        self.assertEqual(initial, (980.0, 20.0))


    def test_rates_only(self):

        self._write("0.6\n0.05\n0.12\n0.04\n0.15\n")
        params, initial = read_parameters(self.path, includes_initial_conds=False)

        np.testing.assert_array_equal(params, [0.04, 0.6, 0.12, 0.15, 0.05])
        self.assertIsNone(initial)


    def test_too_short(self):

        self._write("0.6 0.05 0.12 0.04 0.15\n")
        with self.assertRaises(PreconditionViolation):
            read_parameters(self.path)


    def test_malformed(self):

        self._write("0.6 0.05 abc 0.04 0.15\n")
        with self.assertRaises(ValueError):
            read_parameters(self.path, includes_initial_conds=False)


    def test_missing(self):

        with self.assertRaises(FileNotFoundError):
            read_parameters(os.path.join(self.tmp.name, "nope.in"))


class TestReadObservations(unittest.TestCase):
    """
    Test reading observation files with a 'no_days dim' header
    """

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "observations.in")
        with open(self.path, "w") as file:
            file.write("3 2\n0 10 1\n1 9 2\n2 7 4\n")

    def tearDown(self):
        self.tmp.cleanup()


    def test_read(self):

        labels, data = read_observations(self.path)

        np.testing.assert_array_equal(labels, [0, 1, 2])
        np.testing.assert_array_equal(data, [[10, 1], [9, 2], [7, 4]])

        labels, data = read_observations(self.path, dim=2)
        self.assertEqual(data.shape, (3, 2))


    def test_dim_mismatch(self):

        with self.assertRaises(PreconditionViolation):
            read_observations(self.path, dim=5)


    def test_truncated(self):

        with open(self.path, "w") as file:
            file.write("3 2\n0 10 1\n1 9 2\n")

        with self.assertRaises(PreconditionViolation):
            read_observations(self.path)


class TestSaveResults(unittest.TestCase):
    """
    Test writing trajectories as time indexed tables
    """

    def test_save(self):

        trajectory = np.array([[1.0, 2.0, 3.0], [0.5, 0.25, 0.125]])

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "result.out")
            save_results(0.5, trajectory, path)

            with open(path) as file:
                lines = file.read().splitlines()

        self.assertEqual(len(lines), 3)

        table = np.array([[float(v) for v in line.split("\t")] for line in lines])
        np.testing.assert_array_equal(table[:, 0], [0.0, 0.5, 1.0])
        np.testing.assert_array_equal(table[:, 1:], trajectory.T)


    def test_invalid(self):

        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(PreconditionViolation):
                save_results(0.1, np.ones(3), os.path.join(tmp, "result.out"))


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
