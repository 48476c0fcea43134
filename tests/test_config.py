import unittest

import orjson

from hydrolink.builder import NetworkBuildError, build_link, build_links
from hydrolink.config import ConfigurationState, dump_config, load_config
from hydrolink.elements import MIN_THRESH, Pipe, Pump, Valve
from hydrolink.mempool import MemPool
from hydrolink.types import (
    HeadLossFormula,
    LinkStatus,
    PipeConfig,
    PumpConfig,
    PumpCurveType,
    ValveType,
)
from hydrolink.units import SI, US, Quantity

US_NETWORK = {
    "version": "1.0",
    "network": {
        "options": {
            "unit_system": "us",
            "head_loss_formula": "H-W",
            "viscosity": {"magnitude": 1.1e-5, "units": "ft^2/s"},
        },
        "pipes": [
            {
                "name": "P1",
                "from_node": "J1",
                "to_node": "J2",
                "length": {"magnitude": 1000.0, "units": "ft"},
                "diameter": {"magnitude": 12.0, "units": "inch"},
                "roughness": 120.0,
                "report": True,
            },
            {
                "name": "P2",
                "from_node": "J2",
                "to_node": "J3",
                "initial_status": "closed",
            },
        ],
        "pumps": [
            {
                "name": "PU1",
                "from_node": "R1",
                "to_node": "J1",
                "curve_type": "power_function",
                "curve": [[448.831, 100.0]],
            }
        ],
        "valves": [
            {
                "name": "V1",
                "from_node": "J3",
                "to_node": "J4",
                "valve_type": "FCV",
                "initial_status": "active",
                "initial_setting": 0.2,
                "diameter": {"magnitude": 6.0, "units": "inch"},
            }
        ],
    },
}

SI_NETWORK = {
    "network": {
        "options": {
            "unit_system": "si",
            "head_loss_formula": "D-W",
            "viscosity": {"magnitude": 1.0e-6, "units": "m^2/s"},
        },
        "pipes": [
            {
                "name": "P1",
                "from_node": "J1",
                "to_node": "J2",
                "length": {"magnitude": 100.0, "units": "m"},
                "diameter": {"magnitude": 300.0, "units": "mm"},
                "roughness": 0.26,
            }
        ],
        "pumps": [
            {
                "name": "PU1",
                "from_node": "R1",
                "to_node": "J1",
                "curve_type": "custom",
                "curve": [[0.0, 40.0], [10.0, 30.0], [20.0, 10.0]],
            }
        ],
    },
}


class TestLoadConfig(unittest.TestCase):

    def test_structures_us_network(self):
        state = load_config(orjson.dumps(US_NETWORK))
        network = state.network

        self.assertIs(network.options.unit_system, US)
        self.assertEqual(network.options.head_loss_formula, HeadLossFormula.HAZEN_WILLIAMS)
        self.assertEqual(len(network.pipes), 2)
        self.assertEqual(network.pipes[1].initial_status, LinkStatus.CLOSED)
        self.assertEqual(network.pumps[0].curve_type, PumpCurveType.POWER_FUNCTION)
        self.assertEqual(network.valves[0].valve_type, ValveType.FCV)
        self.assertEqual(network.valves[0].initial_status, LinkStatus.ACTIVE)

    def test_accepts_string_document(self):
        state = load_config(orjson.dumps(SI_NETWORK).decode())
        self.assertIs(state.network.options.unit_system, SI)
        self.assertEqual(state.version, "1.0")

    def test_dump_is_json(self):
        state = load_config(orjson.dumps(US_NETWORK))
        dumped = orjson.loads(dump_config(state))

        pipe = dumped["network"]["pipes"][0]
        self.assertEqual(pipe["name"], "P1")
        self.assertEqual(pipe["initial_status"], "OPEN")
        self.assertEqual(pipe["diameter"]["magnitude"], 12.0)
        self.assertEqual(dumped["network"]["pipes"][1]["initial_status"], "CLOSED")
        self.assertEqual(dumped["network"]["options"]["unit_system"]["name"], "us")

    def test_get_and_update(self):
        state = load_config(orjson.dumps(US_NETWORK))
        self.assertTrue(state.get("network.options.status_report"))

        updated = state.update("network.options", status_report=False)
        self.assertFalse(updated.get("network.options.status_report"))
        self.assertTrue(state.get("network.options.status_report"))
        self.assertEqual(updated.network.pipes, state.network.pipes)

        renamed = state.update(".", version="2.0")
        self.assertEqual(renamed.version, "2.0")

    def test_invalid_paths(self):
        state = ConfigurationState()
        with self.assertRaises(ValueError):
            state.get("network.nothing")
        with self.assertRaises(ValueError):
            state.update("network.pipes", name="P1")


class TestBuildLinks(unittest.TestCase):

    def test_builds_us_network(self):
        state = load_config(orjson.dumps(US_NETWORK))
        pool = MemPool()
        links = build_links(state.network, pool)

        self.assertEqual(list(links), ["P1", "P2", "PU1", "V1"])
        self.assertEqual(len(pool), 4)

        pipe = links["P1"]
        self.assertIsInstance(pipe, Pipe)
        self.assertAlmostEqual(pipe.diameter, 1.0)
        self.assertAlmostEqual(pipe.length, 1000.0)
        self.assertEqual(pipe.roughness, 120.0)
        self.assertTrue(pipe.rpt_flag)
        self.assertEqual((pipe.from_node, pipe.to_node), ("J1", "J2"))
        self.assertGreater(pipe.flow_thresh, MIN_THRESH)
        self.assertEqual(pipe.flow_thresh, pipe.flow_thresh0)

        pump = links["PU1"]
        self.assertIsInstance(pump, Pump)
        self.assertAlmostEqual(pump.curve.design_flow, 1.0, places=5)

        valve = links["V1"]
        self.assertIsInstance(valve, Valve)
        self.assertAlmostEqual(valve.diameter, 0.5)
        valve.initialize(True)
        self.assertAlmostEqual(valve.flow, 0.2)

        links["P2"].initialize(True)
        self.assertEqual(links["P2"].flow, 1.0e-6)

    def test_builds_si_network(self):
        state = load_config(orjson.dumps(SI_NETWORK))
        links = build_links(state.network)

        pipe = links["P1"]
        self.assertAlmostEqual(pipe.length, 328.084, places=3)
        self.assertAlmostEqual(pipe.diameter, 0.984252, places=5)
        self.assertAlmostEqual(pipe.roughness, 0.26e-3 / 0.3048)
        self.assertEqual(pipe.formula, HeadLossFormula.DARCY_WEISBACH)

        curve = links["PU1"].curve
        self.assertEqual(curve.curve_type, PumpCurveType.CUSTOM)
        self.assertAlmostEqual(float(curve.flows[1]), 0.353147, places=5)
        self.assertAlmostEqual(float(curve.heads[0]), 131.234, places=3)

    def test_duplicate_names(self):
        state = ConfigurationState()
        network = state.update(
            "network",
            pipes=[
                PipeConfig(name="L1", from_node="A", to_node="B"),
                PipeConfig(name="L1", from_node="B", to_node="C"),
            ],
        ).network
        with self.assertRaises(NetworkBuildError):
            build_links(network)

    def test_invalid_pump_curve(self):
        state = ConfigurationState().update(
            "network",
            pumps=[PumpConfig(name="PU1", from_node="A", to_node="B", curve=[(100.0, 0.0)])],
        )
        with self.assertRaises(NetworkBuildError):
            build_links(state.network)

    def test_unsupported_configuration(self):
        with self.assertRaises(NetworkBuildError):
            build_link(object(), MemPool())  # type: ignore[arg-type]


class TestLinkConfig(unittest.TestCase):

    def test_pump_requires_curve_or_power(self):
        with self.assertRaises(ValueError):
            PumpConfig(name="PU1", from_node="A", to_node="B")
        with self.assertRaises(ValueError):
            PumpConfig(
                name="PU1",
                from_node="A",
                to_node="B",
                curve_type=PumpCurveType.CONSTANT_HP,
            )
        pump = PumpConfig(
            name="PU1", from_node="A", to_node="B", curve_type="constant_hp", horsepower=5.0
        )
        self.assertEqual(pump.curve_type, PumpCurveType.CONSTANT_HP)

    def test_pipe_validation(self):
        with self.assertRaises(ValueError):
            PipeConfig(name="P1", from_node="A", to_node="B", roughness=0.0)
        with self.assertRaises(ValueError):
            PipeConfig(
                name="P1", from_node="A", to_node="B", diameter=Quantity(0.0, "inch")
            )

    def test_status_names_and_codes(self):
        self.assertEqual(
            PipeConfig(name="P1", from_node="A", to_node="B", initial_status="Closed").initial_status,
            LinkStatus.CLOSED,
        )
        self.assertEqual(
            PipeConfig(name="P1", from_node="A", to_node="B", initial_status=2).initial_status,
            LinkStatus.ACTIVE,
        )
        with self.assertRaises(ValueError):
            PipeConfig(name="P1", from_node="A", to_node="B", initial_status="shut")


if __name__ == "__main__":
    unittest.main()
