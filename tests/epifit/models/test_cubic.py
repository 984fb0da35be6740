########################################################################################
##
##                                  TESTS FOR
##                              'models/cubic.py'
##
########################################################################################

# IMPORTS ==============================================================================

import unittest

import numpy as np

from epifit.models import CubicRelaxation


# TESTS ================================================================================

class TestCubicRelaxation(unittest.TestCase):
    """
    Test the 'CubicRelaxation' test model and its closed form solution
    """

    def test_init(self):

        M = CubicRelaxation()
        self.assertEqual(M.dim, 50)
        self.assertEqual(M.parameters().size, 0)
        np.testing.assert_allclose(M.initial_condition(), 0.01 * np.arange(1, 51))


    def test_derivative(self):

        M = CubicRelaxation()
        x = np.linspace(-1, 1, 50)
        np.testing.assert_allclose(M.derivative(x), -10 * (x - 0.1 * np.arange(50))**3)


    def test_jacobian(self):

        M = CubicRelaxation()
        x = M.initial_condition()
        J = M.jacobian(x)

        np.testing.assert_allclose(np.diag(J), -30 * (x - 0.1 * np.arange(50))**2)
        np.testing.assert_array_equal(J - np.diag(np.diag(J)), np.zeros((50, 50)))


    def test_analytic_solution(self):

        M = CubicRelaxation()

        # matches the initial condition at t=0
        np.testing.assert_allclose(M.analytic_solution(0.0), M.initial_condition(), rtol=1e-12)

        # satisfies the ODE
        t, h = 0.5, 1e-6
        slope = (M.analytic_solution(t + h) - M.analytic_solution(t - h)) / (2 * h)
        np.testing.assert_allclose(slope, M.derivative(M.analytic_solution(t)), rtol=1e-5, atol=1e-9)

        # relaxes towards the equilibrium
        diff_early = np.abs(M.analytic_solution(0.1) - 0.1 * np.arange(50))
        diff_late = np.abs(M.analytic_solution(10.0) - 0.1 * np.arange(50))
        self.assertTrue(np.all(diff_late <= diff_early))


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
