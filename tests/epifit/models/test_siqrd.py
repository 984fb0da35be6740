########################################################################################
##
##                                  TESTS FOR
##                              'models/siqrd.py'
##
########################################################################################

# IMPORTS ==============================================================================

import os
import tempfile
import unittest

import numpy as np

from epifit.models import SIQRD
from epifit.exceptions import PreconditionViolation


# HELPERS ==============================================================================

PARAMS = dict(alpha=0.04, beta=0.6, gamma=0.12, delta=0.15, mu=0.05)
STATE = np.array([900.0, 50.0, 20.0, 25.0, 5.0])


def central_difference_jacobian(model, x, h=1e-4):
    jac = np.zeros((model.dim, model.dim))
    for j in range(model.dim):
        xp, xm = x.copy(), x.copy()
        xp[j] += h
        xm[j] -= h
        jac[:, j] = (model.derivative(xp) - model.derivative(xm)) / (2 * h)
    return jac


# TESTS ================================================================================

class TestSIQRD(unittest.TestCase):
    """
    Test the 'SIQRD' epidemic model
    """

    def test_init(self):

        # parameters stored in model order
        M = SIQRD(**PARAMS)
        np.testing.assert_array_equal(M.parameters(), [0.04, 0.6, 0.12, 0.15, 0.05])
        self.assertEqual(M.alpha, 0.04)
        self.assertEqual(M.mu, 0.05)
        self.assertEqual(len(M), 5)

        # unset values are NaN
        M = SIQRD()
        self.assertTrue(np.all(np.isnan(M.parameters())))
        self.assertTrue(np.all(np.isnan(M.initial_condition())))


    def test_setters(self):

        M = SIQRD(**PARAMS)

        M.set_initial_condition([1000, 10, 0, 0, 0])
        np.testing.assert_array_equal(M.initial_condition(), [1000, 10, 0, 0, 0])

        # returned state is a copy
        x0 = M.initial_condition()
        x0[0] = -1
        self.assertEqual(M.initial_condition()[0], 1000)

        with self.assertRaises(PreconditionViolation):
            M.set_initial_condition([1000, 10, 0])

        with self.assertRaises(PreconditionViolation):
            M.set_parameters(np.ones(4))

        M.set_parameters([0.1, 0.2, 0.3, 0.4, 0.5])
        self.assertEqual(M.delta, 0.4)


    def test_derivative(self):

        M = SIQRD(**PARAMS)
        a, b, g, d, m = 0.04, 0.6, 0.12, 0.15, 0.05
        S, I, Q, R, D = STATE
        N = S + I + R

        expected = [
            -b * S * I / N + m * R,
            I * (b * S / N - g - d - a),
            d * I - (g + a) * Q,
            g * (I + Q) - m * R,
            a * (I + Q),
            ]

        np.testing.assert_allclose(M.derivative(STATE), expected, rtol=1e-14)

        # call operator and output buffer
        out = np.zeros(5)
        res = M(STATE, out)
        self.assertIs(res, out)
        np.testing.assert_allclose(out, expected, rtol=1e-14)

        # wrong shapes
        with self.assertRaises(PreconditionViolation):
            M.derivative(np.ones(4))
        with self.assertRaises(PreconditionViolation):
            M.derivative(STATE, np.zeros(3))


    def test_conservation(self):

        # all terms move mass between compartments
        M = SIQRD(**PARAMS)
        for x in [STATE, np.array([10.0, 990.0, 0.0, 0.0, 0.0]), np.array([1.0, 2.0, 3.0, 4.0, 5.0])]:
            self.assertAlmostEqual(np.sum(M.derivative(x)), 0.0, delta=1e-12 * np.sum(x))


    def test_jacobian(self):

        M = SIQRD(**PARAMS)
        J = M.jacobian(STATE)

        np.testing.assert_allclose(J, central_difference_jacobian(M, STATE), rtol=1e-6, atol=1e-9)

        # no equation depends on D
        np.testing.assert_array_equal(J[:, 4], np.zeros(5))

        # D equation row
        self.assertEqual(J[4, 1], 0.04)
        self.assertEqual(J[4, 2], 0.04)

        # columns sum to zero
        np.testing.assert_allclose(J.sum(axis=0), np.zeros(5), atol=1e-14)


    def test_jacobian_buffer(self):

        M = SIQRD(**PARAMS)

        # buffer is overwritten, not accumulated
        buffer = np.full((5, 5), 7.0)
        M.jacobian(STATE, buffer)
        np.testing.assert_allclose(buffer, M.jacobian(STATE))

        with self.assertRaises(PreconditionViolation):
            M.jacobian(STATE, np.zeros((4, 4)))


    def test_to_string(self):

        M = SIQRD(alpha=0.75, beta=0.5, gamma=0.125, delta=0.0625, mu=0.25)
        self.assertEqual(M.to_string(), "50_25_12_75_6")


    def test_from_file(self):

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "parameters.in")
            with open(path, "w") as file:
                file.write("0.5 0.25 0.125\n0.75 0.0625\n990 10\n")

            M = SIQRD.from_file(path)
            np.testing.assert_array_equal(M.parameters(), [0.75, 0.5, 0.125, 0.0625, 0.25])
            np.testing.assert_array_equal(M.initial_condition(), [990, 10, 0, 0, 0])

            # rates only, initial condition stays unset
            M = SIQRD.from_file(path, includes_initial_conds=False)
            self.assertEqual(M.beta, 0.5)
            self.assertTrue(np.all(np.isnan(M.initial_condition())))


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
