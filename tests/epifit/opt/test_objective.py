########################################################################################
##
##                                  TESTS FOR
##                     'opt/_objective.py' and 'opt/objective.py'
##
########################################################################################

# IMPORTS ==============================================================================

import os
import tempfile
import unittest

import numpy as np

from epifit.models import SIQRD, CubicRelaxation
from epifit.solvers import ExplicitEuler, ImplicitEuler, Heun, TrajectorySolver
from epifit.opt import Observations, Objective, LeastSquaresObjective
from epifit.opt._objective import evaluation_count
from epifit.exceptions import PreconditionViolation


# HELPERS ==============================================================================

TRUTH = np.array([0.04, 0.6, 0.12, 0.15, 0.05])
INITIAL = np.array([980.0, 20.0, 0.0, 0.0, 0.0])


def synthetic_observations(no_days=20, Scheme=Heun, ratio=8):
    """Daily samples of a simulation on the grid the objective uses"""
    model = SIQRD(*TRUTH, initial_condition=INITIAL)
    solver = TrajectorySolver((no_days - 1) * ratio, float(no_days - 1), Scheme=Scheme)
    trajectory = solver.solve(model)
    return Observations(np.arange(no_days), trajectory[:, ::ratio], labels=SIQRD.labels)


class Quadratic(Objective):
    """'0.5 (x - c)^T A (x - c)' with known gradient"""

    def __init__(self, A, c, **kwargs):
        super().__init__(len(c), **kwargs)
        self.A = np.asarray(A, dtype=float)
        self.c = np.asarray(c, dtype=float)

    def evaluate(self, params):
        self.nfev += 1
        diff = np.asarray(params) - self.c
        return 0.5 * diff @ self.A @ diff

    def exact_gradient(self, params):
        return self.A @ (np.asarray(params) - self.c)


# TESTS ================================================================================

class TestObjective(unittest.TestCase):
    """
    Test the finite difference gradient of the 'Objective' base class
    """

    def setUp(self):
        self.F = Quadratic(np.diag([1.0, 2.0, 3.0]), [1.0, -1.0, 0.5])


    def test_evaluate_abstract(self):

        with self.assertRaises(NotImplementedError):
            Objective(2)([0.0, 0.0])


    def test_gradient(self):

        x = np.array([0.3, 0.2, -0.7])
        g = self.F.gradient(x)

        # forward difference bias is 0.5 * h * A_ii
        np.testing.assert_allclose(g, self.F.exact_gradient(x), atol=1e-4)


    def test_gradient_buffer(self):

        x = np.array([0.3, 0.2, -0.7])
        out = np.zeros(3)

        res = self.F.gradient(x, self.F(x), out)
        self.assertIs(res, out)

        # one evaluation per coordinate if the value is given
        self.assertEqual(self.F.nfev, 1 + 3)

        # input is restored
        np.testing.assert_array_equal(x, [0.3, 0.2, -0.7])

        with self.assertRaises(PreconditionViolation):
            self.F.gradient(x, out=np.zeros(2))
        with self.assertRaises(PreconditionViolation):
            self.F.gradient(np.zeros(4))


    def test_fd_step(self):

        F = Quadratic(np.eye(2), [0.0, 0.0], fd_step=1e-3)
        g = F.gradient(np.array([1.0, 1.0]))
        np.testing.assert_allclose(g, [1.0005, 1.0005], rtol=1e-10)


class TestLeastSquaresObjective(unittest.TestCase):
    """
    Test the 'LeastSquaresObjective' of the SIQRD fit
    """

    def setUp(self):
        self.observations = synthetic_observations()


    def test_init(self):

        F = LeastSquaresObjective(self.observations)

        self.assertIsInstance(F.model, SIQRD)
        self.assertEqual(F.n_params, 5)
        self.assertEqual(F.no_days, 20)
        self.assertEqual(F.step_count, 19 * 8)
        self.assertEqual(F.horizon, 19.0)
        self.assertEqual(F.trajectory.shape, (5, 19 * 8 + 1))
        self.assertEqual(F.nfev, 0)


    def test_invalid(self):

        with self.assertRaises(TypeError):
            LeastSquaresObjective(self.observations.data)

        # dimension mismatch
        with self.assertRaises(PreconditionViolation):
            LeastSquaresObjective(self.observations, CubicRelaxation())

        F = LeastSquaresObjective(self.observations)
        with self.assertRaises(PreconditionViolation):
            F(np.ones(4))


    def test_zero_at_truth(self):

        for Scheme in [ExplicitEuler, Heun]:
            with self.subTest(Scheme=Scheme.__name__):
                observations = synthetic_observations(Scheme=Scheme)
                F = LeastSquaresObjective(observations, Scheme=Scheme)
                self.assertLess(F(TRUTH), 1e-24)


    def test_positive(self):

        F = LeastSquaresObjective(self.observations)

        value = F(TRUTH * 1.1)
        self.assertIsInstance(value, float)
        self.assertGreater(value, 0.0)

        # further away is worse
        self.assertGreater(F(TRUTH * 1.3), value)


    def test_normalization(self):

        # scaling the population leaves the value unchanged
        F = LeastSquaresObjective(self.observations)

        scaled = Observations(self.observations.time, 10 * self.observations.data)
        G = LeastSquaresObjective(scaled)

        p = TRUTH * np.array([1.1, 0.9, 1.05, 1.0, 0.95])
        self.assertAlmostEqual(G(p) / F(p), 1.0, places=8)


    def test_value_by_hand(self):

        F = LeastSquaresObjective(self.observations)
        p = TRUTH * 1.2

        model = SIQRD(*p, initial_condition=INITIAL)
        trajectory = TrajectorySolver(19 * 8, 19.0).solve(model)

        diff = trajectory[:, ::8].T - self.observations.data
        expected = np.sum(diff**2) / (20 * 1000.0**2)

        self.assertAlmostEqual(F(p) / expected, 1.0, places=10)


    def test_simulate(self):

        F = LeastSquaresObjective(self.observations)
        trajectory = F.simulate(TRUTH)

        self.assertEqual(trajectory.shape, (5, 153))
        np.testing.assert_allclose(trajectory[:, ::8].T, self.observations.data, rtol=1e-14)

        # does not count as evaluation
        self.assertEqual(F.nfev, 0)


    def test_gradient(self):

        F = LeastSquaresObjective(self.observations)
        p = TRUTH * np.array([1.02, 0.98, 1.02, 0.98, 1.02])

        value = F(p)
        g = F.gradient(p, value)

        self.assertEqual(F.nfev, 6)
        self.assertTrue(np.all(np.isfinite(g)))

        # small step against the gradient decreases the value
        self.assertLess(F(p - 1e-4 * g / np.linalg.norm(g)), value)


    def test_evaluation_count(self):

        F = LeastSquaresObjective(self.observations)
        self.assertEqual(evaluation_count(F), 0)

        F(TRUTH)
        F(TRUTH)
        self.assertEqual(evaluation_count(F), 2)

        # plain callables do not count
        self.assertEqual(evaluation_count(lambda p: 0.0), 0)


    def test_implicit_scheme(self):

        observations = synthetic_observations(no_days=10, Scheme=ImplicitEuler)
        F = LeastSquaresObjective(observations, Scheme=ImplicitEuler, max_iter=50)

        self.assertEqual(F.solver.scheme.max_iter, 50)
        self.assertLess(F(TRUTH), 1e-20)
        self.assertGreater(F(TRUTH * 0.9), 0.0)


    def test_from_files(self):

        with tempfile.TemporaryDirectory() as tmp:
            obs_path = os.path.join(tmp, "observations.in")
            par_path = os.path.join(tmp, "parameters.in")

            with open(obs_path, "w") as file:
                file.write("20 5\n")
                for day, row in enumerate(self.observations.data):
                    file.write(f"{day} " + " ".join(repr(float(v)) for v in row) + "\n")

            with open(par_path, "w") as file:
                # beta mu gamma alpha delta
                file.write("0.6 0.05 0.12 0.04 0.15\n")

            F = LeastSquaresObjective.from_files(obs_path, par_path)

            np.testing.assert_array_equal(F.model.parameters(), TRUTH)
            self.assertLess(F(TRUTH), 1e-24)


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
