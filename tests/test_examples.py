import unittest
from examples import (
    gpreg_example01_1d_regression,
    gpreg_example02_map_selection,
    gpreg_example03_hyperparameter_posterior,
)


class TestExamples(unittest.TestCase):
    def test_01(self):
        gpreg_example01_1d_regression.main()

    def test_02(self):
        gpreg_example02_map_selection.main()

    def test_03(self):
        gpreg_example03_hyperparameter_posterior.main()


if __name__ == "__main__":
    unittest.main()
