# -*- coding: utf-8 -*-
"""
Tests for the forward-additive Lucas-Kanade alignment engine.

Exercises the prepare/align state machine, input validation, the single
Gauss-Newton step on synthetic image pairs with known warps, multi-step
convergence for every motion family, and the singular-system policies.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

import logging

import numpy as np
import pytest

from lkalign.align import ForwardAdditiveAligner
from lkalign.exceptions import (
    AlignmentStateError,
    InvalidInputError,
    SingularSystemError,
)
from lkalign.resample import pixel_grid
from lkalign.vocabulary import WarpType
from lkalign.warp import (
    AffineWarp,
    EuclideanWarp,
    TranslationWarp,
    create_warp,
)


def texture(x, y):
    """Smooth periodic intensity pattern with gradients in both axes."""
    return (
        100.0
        + 30.0 * np.sin(2.0 * np.pi * x / 40.0)
        + 25.0 * np.cos(2.0 * np.pi * y / 50.0)
        + 15.0 * np.sin(2.0 * np.pi * (x + y) / 60.0)
    )


def render(shape, warp=None):
    """Image whose pixel ``p`` is ``texture(warp^-1(p))``.

    With the true warp ``W``, ``render(..., W)`` sampled at ``W(x)`` equals
    ``texture(x)``, so ``W`` is the warp aligning it to ``render(shape)``.
    """
    grid = pixel_grid(shape)
    if warp is not None:
        grid = warp.inverse().apply(grid)
    return texture(grid[:, 0], grid[:, 1]).reshape(shape)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def template():
    """64x64 textured template."""
    return render((64, 64))


@pytest.fixture
def ramp_pair():
    """50x50 horizontal ramp and the same ramp shifted 3 pixels right."""
    cols = np.arange(50, dtype=np.float64)
    template = np.tile(cols + 10.0, (50, 1))
    target = np.tile(cols - 3.0 + 10.0, (50, 1))
    return template, target


def corners(shape):
    rows, cols = shape
    return np.array([
        [0.0, 0.0],
        [cols - 1.0, 0.0],
        [cols - 1.0, rows - 1.0],
        [0.0, rows - 1.0],
    ])


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class TestStateMachine:

    def test_starts_unprepared(self):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        assert not aligner.is_prepared
        assert aligner.template_image is None
        assert aligner.error_image is None
        assert 'unprepared' in repr(aligner)

    def test_align_before_prepare_raises(self):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        with pytest.raises(AlignmentStateError, match="prepare"):
            aligner.align(TranslationWarp())

    def test_prepare_allocates_template_sized_buffers(self, template):
        target = render((80, 72))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        assert aligner.is_prepared
        assert aligner.template_image.shape == (64, 64)
        assert aligner.target_image.shape == (80, 72)
        assert aligner.gradient_x.shape == (80, 72)
        for buf in (aligner.warped_target, aligner.warped_gradient_x,
                    aligner.warped_gradient_y, aligner.error_image):
            assert buf.shape == (64, 64)

    def test_prepare_converts_to_float(self):
        img = (np.arange(100, dtype=np.uint8).reshape(10, 10))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(img, img)
        assert aligner.template_image.dtype == np.float64
        assert aligner.target_image.dtype == np.float64

    def test_float32_precision(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation', precision='float32')
        aligner.prepare(template, template)
        aligner.align(TranslationWarp())
        assert aligner.template_image.dtype == np.float32
        assert aligner.warped_target.dtype == np.float32
        assert aligner.last_hessian.dtype == np.float64

    def test_buffers_are_read_only(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, template)
        aligner.align(TranslationWarp())
        with pytest.raises(ValueError):
            aligner.error_image[0, 0] = 1.0

    def test_prepare_does_not_alias_inputs(self, template):
        original = template.copy()
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, template)
        template[:] = 0.0
        np.testing.assert_array_equal(aligner.template_image, original)

    def test_gradients_are_normalized_sobel(self, ramp_pair):
        template, target = ramp_pair
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        np.testing.assert_allclose(aligner.gradient_x[:, 1:-1], 1.0)
        np.testing.assert_allclose(aligner.gradient_x[:, [0, -1]], 0.0)
        np.testing.assert_allclose(aligner.gradient_y, 0.0)

    def test_gradient_mode_setting_reaches_sobel(self, ramp_pair):
        template, target = ramp_pair
        aligner = ForwardAdditiveAligner(warp_type='translation',
                                         gradient_mode='reflect')
        aligner.prepare(template, target)
        np.testing.assert_allclose(aligner.gradient_x[:, [0, -1]], 0.5)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class TestInputValidation:

    def test_multichannel_template_raises(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        rgb = np.stack([template] * 3, axis=-1)
        with pytest.raises(InvalidInputError, match="single-channel"):
            aligner.prepare(rgb, template)
        assert not aligner.is_prepared
        assert aligner.template_image is None

    def test_multichannel_target_raises(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        with pytest.raises(InvalidInputError, match="target_image"):
            aligner.prepare(template, np.zeros((64, 64, 2)))
        assert not aligner.is_prepared

    def test_failed_prepare_keeps_previous_state(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        target = render((64, 64), TranslationWarp([1.0, 0.0]))
        aligner.prepare(template, target)
        with pytest.raises(InvalidInputError):
            aligner.prepare(np.zeros((8, 8, 3)), np.zeros((8, 8)))
        assert aligner.is_prepared
        np.testing.assert_array_equal(aligner.template_image, template)
        np.testing.assert_array_equal(aligner.target_image, target)

    def test_single_band_3d_accepted(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template[:, :, np.newaxis], template[:, :, np.newaxis])
        assert aligner.template_image.shape == (64, 64)

    def test_empty_image_raises(self):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        with pytest.raises(InvalidInputError, match="empty"):
            aligner.prepare(np.zeros((0, 5)), np.zeros((5, 5)))

    def test_wrong_warp_family_raises(self, template):
        aligner = ForwardAdditiveAligner(warp_type='affine')
        aligner.prepare(template, template)
        warp = EuclideanWarp()
        with pytest.raises(InvalidInputError, match="affine"):
            aligner.align(warp)
        np.testing.assert_array_equal(warp.get_parameters(), 0.0)


# ---------------------------------------------------------------------------
# Single Gauss-Newton step
# ---------------------------------------------------------------------------

class TestSingleStep:

    @pytest.mark.parametrize('warp_type', list(WarpType), ids=lambda t: t.value)
    def test_identical_images_give_zero_update(self, template, warp_type):
        aligner = ForwardAdditiveAligner(warp_type=warp_type)
        aligner.prepare(template, template)
        warp = create_warp(warp_type)
        residual = aligner.align(warp)
        assert residual == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(aligner.last_delta, 0.0, atol=1e-12)
        np.testing.assert_allclose(warp.get_parameters(), 0.0, atol=1e-12)

    def test_step_writes_into_prepared_buffers(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, render((96, 96), TranslationWarp([1.0, 1.0])))
        buffers = (aligner.warped_target, aligner.warped_gradient_x,
                   aligner.warped_gradient_y, aligner.error_image)
        aligner.align(TranslationWarp())
        after = (aligner.warped_target, aligner.warped_gradient_x,
                 aligner.warped_gradient_y, aligner.error_image)
        for before, current in zip(buffers, after):
            assert np.shares_memory(before, current)
        assert np.abs(aligner.error_image).max() > 0.0

    def test_step_maps_template_grid_once(self, template):
        calls = []

        class CountingWarp(TranslationWarp):
            def apply(self, points):
                calls.append(np.shape(points))
                return super().apply(points)

        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, render((96, 96), TranslationWarp([1.0, 1.0])))
        aligner.align(CountingWarp())
        assert calls == [(64 * 64, 2)]

    @pytest.mark.parametrize('warp_type', list(WarpType), ids=lambda t: t.value)
    def test_hessian_is_symmetric(self, template, warp_type):
        aligner = ForwardAdditiveAligner(warp_type=warp_type)
        aligner.prepare(template, render((64, 64), TranslationWarp([0.5, 0.5])))
        aligner.align(create_warp(warp_type))
        hessian = aligner.last_hessian
        p = create_warp(warp_type).n_parameters
        assert hessian.shape == (p, p)
        np.testing.assert_allclose(
            hessian, hessian.T, rtol=1e-12, atol=1e-12 * np.abs(hessian).max()
        )

    def test_update_is_additive(self, template):
        target = render((96, 96), TranslationWarp([1.0, 1.0]))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        warp = TranslationWarp([0.25, -0.25])
        before = warp.get_parameters()
        aligner.align(warp)
        np.testing.assert_allclose(
            warp.get_parameters(), before + aligner.last_delta
        )

    def test_warp_is_modified(self, template):
        target = render((96, 96), TranslationWarp([1.0, 1.0]))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        warp = TranslationWarp()
        aligner.align(warp)
        assert np.all(warp.get_parameters() != 0.0)

    def test_residual_is_mean_error(self, template):
        target = render((96, 96), TranslationWarp([1.0, 1.0]))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        residual = aligner.align(TranslationWarp())
        assert residual == pytest.approx(float(np.mean(aligner.error_image)))
        np.testing.assert_allclose(
            aligner.error_image, aligner.template_image - aligner.warped_target
        )

    def test_translation_recovers_shift(self, template):
        target = render((96, 96), TranslationWarp([1.0, 1.0]))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        warp = TranslationWarp()
        aligner.align(warp)
        np.testing.assert_allclose(warp.get_parameters(), [1.0, 1.0], atol=0.2)

    def test_error_decreases_after_update(self, template):
        target = render((96, 96), TranslationWarp([1.0, 1.0]))
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        warp = TranslationWarp()
        aligner.align(warp)
        rms_before = float(np.sqrt(np.mean(aligner.error_image ** 2)))
        aligner.align(warp)
        rms_after = float(np.sqrt(np.mean(aligner.error_image ** 2)))
        assert rms_after < rms_before

    def test_ramp_shift_three_pixels(self, ramp_pair):
        template, target = ramp_pair
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        warp = TranslationWarp()
        first = aligner.align(warp)
        delta = aligner.last_delta
        assert delta[0] == pytest.approx(3.0, abs=0.2)
        assert delta[1] == pytest.approx(0.0, abs=0.2)
        # Edge columns carry zero gradient, interior columns unit slope.
        assert delta[0] == pytest.approx(3.0)
        assert first == pytest.approx(3.0)
        second = aligner.align(warp)
        assert abs(second) < abs(first)


# ---------------------------------------------------------------------------
# Multi-step convergence
# ---------------------------------------------------------------------------

class TestConvergence:

    def test_translation_converges_exactly(self, template):
        truth = TranslationWarp([2.0, 1.0])
        target = render((96, 96), truth)
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        warp = TranslationWarp()
        for _ in range(15):
            aligner.align(warp)
        np.testing.assert_allclose(warp.get_parameters(), [2.0, 1.0], atol=0.01)

    @pytest.mark.parametrize('warp_type, truth_params, steps, tol', [
        (WarpType.EUCLIDEAN, [3.0, 2.0, 0.02], 40, 0.1),
        (WarpType.SIMILARITY, [2.0, 1.5, 0.01, 0.015], 40, 0.1),
        (WarpType.AFFINE, [0.01, -0.01, 0.01, -0.005, 2.0, 1.5], 40, 0.1),
        (WarpType.PROJECTIVE,
         [0.01, -0.01, 0.01, -0.005, 2.0, 1.5, 1e-4, -1e-4], 60, 0.3),
    ], ids=['euclidean', 'similarity', 'affine', 'projective'])
    def test_point_dependent_families(
        self, template, warp_type, truth_params, steps, tol
    ):
        truth = create_warp(warp_type, truth_params)
        target = render((96, 96), truth)
        aligner = ForwardAdditiveAligner(warp_type=warp_type)
        aligner.prepare(template, target)
        warp = create_warp(warp_type)
        for _ in range(steps):
            aligner.align(warp)
        pts = corners(template.shape)
        np.testing.assert_allclose(warp.apply(pts), truth.apply(pts), atol=tol)

    def test_affine_with_prior_estimate(self, template):
        truth = AffineWarp([0.01, -0.01, 0.01, -0.005, 2.0, 1.5])
        target = render((96, 96), truth)
        aligner = ForwardAdditiveAligner(warp_type='affine')
        aligner.prepare(template, target)
        warp = AffineWarp([0.0, 0.0, 0.0, 0.0, 1.8, 1.4])
        for _ in range(20):
            aligner.align(warp)
        pts = corners(template.shape)
        np.testing.assert_allclose(warp.apply(pts), truth.apply(pts), atol=0.1)


# ---------------------------------------------------------------------------
# Re-preparation
# ---------------------------------------------------------------------------

class TestReprepare:

    def test_second_pair_fully_replaces_buffers(self, template):
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, render((96, 96), TranslationWarp([2.0, 1.0])))
        aligner.align(TranslationWarp())
        assert aligner.last_delta is not None

        small = render((32, 48))
        aligner.prepare(small, small)
        assert aligner.last_hessian is None
        assert aligner.last_delta is None

        warp = TranslationWarp()
        residual = aligner.align(warp)
        assert aligner.error_image.shape == (32, 48)
        assert aligner.warped_target.shape == (32, 48)
        assert residual == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(warp.get_parameters(), 0.0, atol=1e-12)


# ---------------------------------------------------------------------------
# Singular systems
# ---------------------------------------------------------------------------

class TestSingularSystem:

    def test_lstsq_leaves_flat_image_unchanged(self):
        flat = np.full((20, 20), 7.0)
        aligner = ForwardAdditiveAligner(warp_type='affine')
        aligner.prepare(flat, flat + 1.0)
        warp = AffineWarp([0.0, 0.0, 0.0, 0.0, 0.5, 0.5])
        residual = aligner.align(warp)
        assert residual == pytest.approx(-1.0)
        np.testing.assert_allclose(
            warp.get_parameters(), [0.0, 0.0, 0.0, 0.0, 0.5, 0.5]
        )

    def test_lstsq_warns_when_rank_deficient(self, ramp_pair, caplog):
        template, target = ramp_pair
        aligner = ForwardAdditiveAligner(warp_type='translation')
        aligner.prepare(template, target)
        with caplog.at_level(logging.WARNING, logger='lkalign.align.forward_additive'):
            aligner.align(TranslationWarp())
        assert 'rank deficient' in caplog.text

    def test_strict_raises_on_flat_image(self):
        flat = np.full((20, 20), 7.0)
        aligner = ForwardAdditiveAligner(warp_type='translation', solver='strict')
        aligner.prepare(flat, flat)
        warp = TranslationWarp([1.0, 2.0])
        with pytest.raises(SingularSystemError, match="ill-conditioned"):
            aligner.align(warp)
        np.testing.assert_array_equal(warp.get_parameters(), [1.0, 2.0])

    def test_strict_raises_on_one_dimensional_texture(self, ramp_pair):
        template, target = ramp_pair
        aligner = ForwardAdditiveAligner(warp_type='translation', solver='strict')
        aligner.prepare(template, target)
        with pytest.raises(SingularSystemError):
            aligner.align(TranslationWarp())

    def test_strict_solves_well_conditioned(self, template):
        target = render((96, 96), TranslationWarp([1.0, 1.0]))
        strict = ForwardAdditiveAligner(warp_type='translation', solver='strict')
        loose = ForwardAdditiveAligner(warp_type='translation')
        strict.prepare(template, target)
        loose.prepare(template, target)
        w1, w2 = TranslationWarp(), TranslationWarp()
        strict.align(w1)
        loose.align(w2)
        np.testing.assert_allclose(w1.get_parameters(), w2.get_parameters(), rtol=1e-9)
