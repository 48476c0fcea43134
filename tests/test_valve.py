import math
import unittest

from hydrolink.elements import HIGH_RESISTANCE, MIN_THRESH, Valve
from hydrolink.properties import MIN_GRADIENT
from hydrolink.types import LinkStatus, ValveType

VISCOSITY = 1.1e-5


def make_valve(valve_type: ValveType, status: LinkStatus, setting: float = 0.0):
    valve = Valve("V1")
    valve.valve_type = valve_type
    valve.diameter = 1.0
    valve.loss_coeff = 0.5
    valve.init_status = status
    valve.init_setting = setting
    valve.set_flow_threshold(VISCOSITY)
    valve.initialize(True)
    return valve


class TestValveHeadLoss(unittest.TestCase):

    def test_threshold_uses_valve_diameter(self):
        valve = make_valve(ValveType.TCV, LinkStatus.OPEN)
        expected = 200.0 / (4.0 / (math.pi * VISCOSITY))
        self.assertAlmostEqual(valve.flow_thresh, expected)
        self.assertGreater(valve.flow_thresh, MIN_THRESH)

    def test_open_valve_minor_loss(self):
        valve = make_valve(ValveType.PRV, LinkStatus.OPEN, setting=50.0)
        valve.find_head_loss(2.0, VISCOSITY)
        k = 0.02517 * 0.5
        self.assertAlmostEqual(valve.h_loss, 4.0 * k)
        self.assertAlmostEqual(valve.h_grad, 4.0 * k)

    def test_active_tcv_uses_setting_as_loss_coefficient(self):
        valve = make_valve(ValveType.TCV, LinkStatus.ACTIVE, setting=2.0)
        valve.find_head_loss(-1.0, VISCOSITY)
        k = 0.02517 * 2.0
        self.assertAlmostEqual(valve.h_loss, -k)
        self.assertAlmostEqual(valve.h_grad, 2.0 * k)

    def test_active_fcv_pins_flow(self):
        valve = make_valve(ValveType.FCV, LinkStatus.ACTIVE, setting=0.3)
        self.assertAlmostEqual(valve.flow, 0.3)

        valve.find_head_loss(0.3, VISCOSITY)
        self.assertAlmostEqual(valve.h_loss, 0.0)
        self.assertEqual(valve.h_grad, HIGH_RESISTANCE)

        valve.find_head_loss(0.4, VISCOSITY)
        self.assertGreater(valve.h_loss, 0.0)

    def test_active_pbv_imposes_setting(self):
        valve = make_valve(ValveType.PBV, LinkStatus.ACTIVE, setting=12.0)
        valve.find_head_loss(1.0, VISCOSITY)
        self.assertAlmostEqual(valve.h_loss, 12.0 + MIN_GRADIENT)
        self.assertEqual(valve.h_grad, MIN_GRADIENT)

    def test_closed_valves(self):
        for status in (LinkStatus.CLOSED, LinkStatus.TEMP_CLOSED):
            valve = make_valve(ValveType.TCV, status)
            valve.find_head_loss(1.0, VISCOSITY)
            self.assertEqual(valve.h_grad, HIGH_RESISTANCE)

    def test_lossless_valve_has_usable_gradient(self):
        valve = make_valve(ValveType.TCV, LinkStatus.OPEN)
        valve.loss_coeff = 0.0
        valve.find_head_loss(1.0, VISCOSITY)
        self.assertEqual(valve.h_loss, 0.0)
        self.assertEqual(valve.h_grad, MIN_GRADIENT)

    def test_initial_flow(self):
        valve = make_valve(ValveType.PRV, LinkStatus.OPEN)
        self.assertAlmostEqual(valve.flow, math.pi / 4.0)
        closed = make_valve(ValveType.PRV, LinkStatus.CLOSED)
        self.assertEqual(closed.flow, 1.0e-6)
        self.assertEqual(closed.type_str(), "Valve")


if __name__ == "__main__":
    unittest.main()
