"""
Unit Tests for the Heat Conduction Solver
=========================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from steplab.cancel import CancellationToken
from steplab.errors import (
    ComputationCancelledError, ExcessiveWorkloadError, InvalidParameterError,
)
from steplab.heat import (
    HeatDiffusionSolver, HeatGridParameters, elimination_coefficients,
    iter_heat, solve_heat,
)
from steplab.materials import (
    ALL_MATERIALS, ALUMINIUM, COPPER, GLASS, Material, get_material,
)
from steplab.validation import analytic_rod_temperature, direct_implicit_solution


def rod(**kwargs):
    defaults = dict(length=0.1, left_temp=100.0, right_temp=100.0,
                    initial_temp=20.0, total_time=2.0, dx=0.01, dt=0.1)
    defaults.update(kwargs)
    return HeatGridParameters(**defaults)


class TestMaterials:

    def test_aluminium_reference(self):
        assert ALUMINIUM.density == 2700.0
        assert ALUMINIUM.specific_heat == 900.0
        assert ALUMINIUM.conductivity == 230.0
        assert ALUMINIUM.heat_capacity == 2700.0 * 900.0

    def test_all_presets_valid(self):
        for material in ALL_MATERIALS.values():
            material.validate()

    def test_bad_material(self):
        with pytest.raises(InvalidParameterError):
            Material('Void', density=0.0, specific_heat=1.0, conductivity=1.0).validate()
        with pytest.raises(InvalidParameterError):
            get_material('unobtainium')


class TestGrid:

    def test_segment_count(self):
        assert rod(dx=0.01).segments == 10
        assert rod(dx=0.001).segments == 100
        assert rod(dx=0.0001).segments == 1000

    def test_at_least_two_segments(self):
        assert rod(dx=0.06).segments == 2

    def test_time_steps(self):
        assert rod(total_time=2.0, dt=0.01).time_steps == 200
        assert rod(total_time=2.0, dt=0.3).time_steps == 6

    def test_profile_shape_and_positions(self):
        profile = solve_heat(rod(dx=0.01))
        assert len(profile) == 11
        assert profile.positions[0] == 0.0
        assert abs(profile.positions[-1] - 0.1) < 1e-12
        assert profile.midpoint == profile.temperatures[5]
        assert profile.step == 20
        assert abs(profile.time - 2.0) < 1e-12

    def test_elimination_coefficients(self):
        alpha = elimination_coefficients(1.0, 3.0, 1.0, 10)
        assert alpha[0] == 0.0
        assert alpha[1] == 1.0 / 3.0
        assert all(0.0 < a < 1.0 for a in alpha[1:10])


class TestBoundaries:

    def test_boundaries_exact_at_every_snapshot(self):
        params = rod(left_temp=100.0, right_temp=0.0, initial_temp=20.0, dt=0.05)
        seen = []
        final = solve_heat(params, snapshot_every=1, on_snapshot=seen.append)
        assert len(seen) == params.time_steps
        for profile in seen + [final]:
            assert profile.temperatures[0] == 100.0
            assert profile.temperatures[-1] == 0.0

    def test_boundaries_exact_in_generator(self):
        params = rod(left_temp=-5.5, right_temp=73.25, dt=0.2)
        for profile in iter_heat(params):
            assert profile.temperatures[0] == -5.5
            assert profile.temperatures[-1] == 73.25

    def test_steady_state_from_step_zero(self):
        params = rod(left_temp=37.5, right_temp=37.5, initial_temp=37.5)
        for profile in iter_heat(params):
            assert np.allclose(profile.temperatures, 37.5, rtol=0, atol=1e-9)

    def test_converges_to_boundary_temperature(self):
        params = rod(total_time=200.0, dt=1.0, dx=0.005)
        profile = solve_heat(params)
        assert np.max(np.abs(profile.temperatures - 100.0)) < 1e-3

    def test_linear_steady_state(self):
        params = rod(left_temp=100.0, right_temp=0.0, total_time=400.0, dt=2.0, dx=0.01)
        profile = solve_heat(params)
        expected = 100.0 - 1000.0 * profile.positions
        assert np.allclose(profile.temperatures, expected, atol=1e-3)

    def test_interior_stays_within_bounds(self):
        """Implicit scheme is monotone: no over/undershoot even for huge dt."""
        params = rod(dt=50.0, total_time=100.0, dx=0.001)
        profile = solve_heat(params)
        assert np.all(profile.temperatures >= 20.0 - 1e-9)
        assert np.all(profile.temperatures <= 100.0 + 1e-9)

    def test_zero_total_time_returns_initial(self):
        profile = solve_heat(rod(total_time=0.0))
        assert profile.step == 0
        assert profile.temperatures[0] == 100.0
        assert np.all(profile.temperatures[1:-1] == 20.0)


class TestAccuracy:

    def test_thomas_matches_sparse_direct_solve(self):
        params = rod(left_temp=80.0, right_temp=10.0, initial_temp=30.0,
                     dx=0.01, dt=0.05, total_time=2.5)
        profile = solve_heat(params)
        reference = direct_implicit_solution(params)
        assert np.allclose(profile.temperatures, reference, rtol=1e-10, atol=1e-9)

    def test_two_segment_grid_matches_direct_solve(self):
        params = rod(dx=0.05, dt=0.1)
        assert params.segments == 2
        assert np.allclose(solve_heat(params).temperatures,
                           direct_implicit_solution(params), atol=1e-9)

    def test_tracks_analytic_series(self):
        params = rod(total_time=20.0, dt=0.05, dx=0.002)
        profile = solve_heat(params)
        exact = analytic_rod_temperature(params, profile.positions, profile.time)
        assert np.max(np.abs(profile.temperatures - exact)) < 0.5

    def test_conductive_material_heats_faster(self):
        params = rod(total_time=5.0, dt=0.05)
        copper = HeatDiffusionSolver(COPPER).solve(params)
        glass = HeatDiffusionSolver(GLASS).solve(params)
        assert copper.midpoint > glass.midpoint


class TestSnapshots:

    def test_deterministic(self):
        params = rod(dx=0.001, dt=0.01)
        assert np.array_equal(solve_heat(params).temperatures,
                              solve_heat(params).temperatures)

    def test_cadence_does_not_change_result(self):
        params = rod(dt=0.05)
        plain = solve_heat(params)
        for every in (1, 3, 7):
            observed = solve_heat(params, snapshot_every=every, on_snapshot=lambda p: None)
            assert np.array_equal(plain.temperatures, observed.temperatures)

    def test_callback_cadence(self):
        steps = []
        solve_heat(rod(dt=0.1), snapshot_every=3, on_snapshot=lambda p: steps.append(p.step))
        assert steps == [3, 6, 9, 12, 15, 18]

    def test_callback_cannot_alter_solve(self):
        params = rod(dt=0.05)

        def vandal(profile):
            profile.temperatures[:] = 0.0

        assert np.array_equal(solve_heat(params, on_snapshot=vandal).temperatures,
                              solve_heat(params).temperatures)

    def test_generator_steps_and_final(self):
        params = rod(total_time=1.0, dt=0.1)
        profiles = list(iter_heat(params, snapshot_every=4))
        assert [p.step for p in profiles] == [0, 4, 8, 10]
        assert np.array_equal(profiles[-1].temperatures, solve_heat(params).temperatures)

    def test_generator_resumes_where_it_left_off(self):
        params = rod(total_time=1.0, dt=0.1)
        gen = iter_heat(params, snapshot_every=5)
        first = next(gen)
        second = next(gen)
        assert (first.step, second.step) == (0, 5)
        assert [p.step for p in gen] == [10]


class TestErrors:

    @pytest.mark.parametrize("kwargs", [
        {'dx': 0.0}, {'dx': -0.01}, {'dt': 0.0}, {'dt': -1.0},
        {'length': 0.01, 'dx': 0.01}, {'length': 0.005, 'dx': 0.01},
        {'left_temp': float('nan')}, {'total_time': float('inf')},
        {'total_time': -1.0},
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(InvalidParameterError):
            solve_heat(rod(**kwargs))

    def test_generator_validates_before_iteration(self):
        with pytest.raises(InvalidParameterError):
            iter_heat(rod(dt=0.0))

    def test_bad_cadence(self):
        with pytest.raises(InvalidParameterError):
            solve_heat(rod(), snapshot_every=0, on_snapshot=print)

    def test_excessive_workload(self):
        params = rod(dx=0.0001, dt=0.0001)
        assert params.workload == 999 * 20000
        with pytest.raises(ExcessiveWorkloadError) as info:
            solve_heat(params, max_work=1_000_000)
        assert info.value.work == params.workload
        assert info.value.max_work == 1_000_000

    @pytest.mark.parametrize("kwargs", [
        {'dt': 5e-324},
        {'length': 1e300, 'dx': 1e-10},
    ])
    def test_overflowing_grid_is_excessive(self, kwargs):
        params = rod(**kwargs)
        params.validate()
        with pytest.raises(ExcessiveWorkloadError) as info:
            solve_heat(params)
        assert info.value.work == float('inf')
        with pytest.raises(ExcessiveWorkloadError):
            iter_heat(params)

    def test_overflowing_grid_without_budget(self):
        with pytest.raises(InvalidParameterError):
            solve_heat(rod(dt=5e-324), max_work=None)

    def test_overflowing_grid_stops_sweep(self):
        from steplab.sweep import heat_grid_table
        with pytest.raises(ExcessiveWorkloadError):
            heat_grid_table(rod(), time_steps=(5e-324,), space_steps=(0.01,))

    def test_generator_accepts_no_cadence(self):
        params = rod(total_time=0.5, dt=0.1)
        profiles = list(iter_heat(params, snapshot_every=None))
        assert [p.step for p in profiles] == [0, 1, 2, 3, 4, 5]

    def test_default_budget_allows_reference_grid(self):
        params = rod(dx=0.001, dt=0.01)
        assert HeatDiffusionSolver().solve(params).step == 200

    def test_cancel_from_callback(self):
        token = CancellationToken()

        def stop_at_five(profile):
            if profile.step == 5:
                token.cancel()

        with pytest.raises(ComputationCancelledError) as info:
            solve_heat(rod(dt=0.1), on_snapshot=stop_at_five, cancel=token)
        assert info.value.step == 5

    def test_cancel_generator(self):
        token = CancellationToken()
        gen = iter_heat(rod(dt=0.1), snapshot_every=2, cancel=token)
        next(gen)
        next(gen)
        token.cancel()
        with pytest.raises(ComputationCancelledError):
            next(gen)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
