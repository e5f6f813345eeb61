"""Unit tests for the frame renderer.

Tests cover:
- Render target validation
- Buffer size, layout and alpha
- Channel clamping and non-finite values
- Pixel addressing (x outer, y inner, row 0 at the bottom)
- FrameRenderer rendering and animation
- Each render drawing the scene it is given
"""

import numpy as np
import pytest


def _two_by_two_scene(light):
    """A sphere filling a 2x2 view, lit from one side."""
    from spheretrace.camera.pinhole import Camera
    from spheretrace.scene.manager import SceneManager

    scene = SceneManager()
    scene.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=90))
    scene.add_sphere((0, 0, -3), 2.5, color=(200, 200, 200), specular=0.0, lambert=0.9, ambient=0.1)
    scene.add_light(light)
    return scene


class TestRenderTarget:
    """Tests for render target setup."""

    @pytest.mark.parametrize("width, height", [(1, 10), (10, 1), (4096, 10), (10, 4096)])
    def test_invalid_dimensions(self, width, height):
        """Test out-of-range dimensions raise ValueError."""
        from spheretrace.core.renderer import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_get_image_dimensions(self):
        """Test dimensions are stored."""
        from spheretrace.core.renderer import get_image_dimensions, setup_render_target

        setup_render_target(32, 24)
        assert get_image_dimensions() == (32, 24)

    def test_render_without_target(self):
        """Test rendering without a render target raises RuntimeError."""
        from spheretrace.core.renderer import render_frame

        with pytest.raises(RuntimeError):
            render_frame()

    def test_render_without_camera(self):
        """Test rendering without a camera raises RuntimeError."""
        from spheretrace.core.renderer import render_frame, setup_render_target

        setup_render_target(4, 4)
        with pytest.raises(RuntimeError):
            render_frame()


class TestFrameBuffer:
    """Tests for buffer contents."""

    def test_empty_scene_is_opaque_white(self):
        """Test every byte of an empty scene is 255."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=60))
        frame = FrameRenderer(8, 6).render(scene)

        assert frame.dtype == np.uint8
        assert frame.shape == (8 * 6 * 4,)
        assert np.all(frame == 255)

    def test_lit_side_brighter(self):
        """Test the lit half (x = 1) is brighter than the ambient half (x = 0)."""
        from spheretrace.core.renderer import FrameRenderer

        renderer = FrameRenderer(2, 2)
        renderer.render(_two_by_two_scene((10, 0, 0)))
        image = renderer.get_frame_image()

        for y in range(2):
            # Unlit side keeps only the ambient term: 200 * 0.1
            assert tuple(image[y, 0, :3]) == (20, 20, 20)
            lit = image[y, 1, 0]
            assert 75 <= lit <= 85
            assert image[y, 0, 3] == 255
            assert image[y, 1, 3] == 255

    def test_row_zero_is_bottom(self):
        """Test row y = 0 of the buffer is the bottom of the viewport."""
        from spheretrace.core.renderer import FrameRenderer

        renderer = FrameRenderer(2, 2)
        frame = renderer.render(_two_by_two_scene((0, 10, 0)))

        # index = x * 4 + y * width * 4
        bottom_left = frame[0 * 4 + 0 * 2 * 4]
        top_left = frame[0 * 4 + 1 * 2 * 4]
        assert bottom_left == 20
        assert 75 <= top_left <= 85

    def test_channels_clamped(self):
        """Test over-bright colors are written as 255."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=90))
        scene.add_sphere((0, 0, -3), 2.5, color=(400, 255, 0), lambert=0.0, ambient=1.0)
        frame = FrameRenderer(2, 2).render(scene)
        image = frame.reshape(2, 2, 4)

        assert np.all(image[:, :, 0] == 255)
        assert np.all(image[:, :, 1] == 255)
        assert np.all(image[:, :, 2] == 0)


class TestChannelWrite:
    """Tests for the per-channel byte conversion."""

    def test_to_channel_policy(self):
        """Test non-finite and negative values become 0 and the rest clamp and round."""
        import taichi as ti

        from spheretrace.core.renderer import to_channel

        values = np.array([np.nan, np.inf, -np.inf, -5.0, 254.6, 300.0, 127.4], dtype=np.float32)
        n = len(values)
        source = ti.field(dtype=ti.f32, shape=n)
        result = ti.field(dtype=ti.u8, shape=n)
        source.from_numpy(values)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                result[i] = to_channel(source[i])

        test_kernel()
        assert result.to_numpy().tolist() == [0, 0, 0, 0, 255, 255, 127]

    def test_non_finite_color_written_as_zero(self):
        """Test a sphere with an infinite color renders that channel as 0."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=90))
        scene.add_sphere((0, 0, -3), 2.5, color=(np.inf, 100, 0), lambert=0.0, ambient=1.0)
        image = FrameRenderer(2, 2).render(scene).reshape(2, 2, 4)

        assert np.all(image[:, :, 0] == 0)
        assert np.all(image[:, :, 1] == 100)
        assert np.all(image[:, :, 3] == 255)


class TestSceneIsolation:
    """Tests that render() draws the scene it is given."""

    def test_render_after_other_scene_created(self):
        """Test a second SceneManager does not change what the first renders."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        first = SceneManager()
        first.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=90))
        first.add_sphere((0, 0, -3), 2.5, color=(200, 0, 0), lambert=0.0, ambient=1.0)
        renderer = FrameRenderer(2, 2)
        before = renderer.render(first)

        SceneManager()
        after = renderer.render(first)

        assert tuple(after[:4]) == (200, 0, 0, 255)
        assert np.array_equal(before, after)
        assert first.get_sphere_count() == 1

    def test_alternating_scenes(self):
        """Test rendering two scenes in turn draws each one's own spheres."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        camera = Camera(position=(0, 0, 0), target=(0, 0, -1), fov=90)
        red = SceneManager()
        red.set_camera(camera)
        red.add_sphere((0, 0, -3), 2.5, color=(200, 0, 0), lambert=0.0, ambient=1.0)
        blue = SceneManager()
        blue.set_camera(camera)
        blue.add_sphere((0, 0, -3), 2.5, color=(0, 0, 200), lambert=0.0, ambient=1.0)
        renderer = FrameRenderer(2, 2)

        assert tuple(renderer.render(red)[:4]) == (200, 0, 0, 255)
        assert tuple(renderer.render(blue)[:4]) == (0, 0, 200, 255)
        assert tuple(renderer.render(red)[:4]) == (200, 0, 0, 255)


class TestFrameRenderer:
    """Tests for the FrameRenderer class."""

    def test_render_requires_camera(self):
        """Test rendering a scene without a camera raises RuntimeError."""
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        with pytest.raises(RuntimeError):
            FrameRenderer(4, 4).render(SceneManager())

    def test_frame_count_and_resize(self):
        """Test frame counting and that resize resets it."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=60))
        renderer = FrameRenderer(4, 4)
        renderer.render(scene)
        renderer.render(scene)
        assert renderer.frame_count == 2

        renderer.resize(6, 4)
        assert renderer.frame_count == 0
        assert renderer.render(scene).shape == (6 * 4 * 4,)
        assert "width=6" in repr(renderer)

    def test_two_renderers_keep_their_sizes(self):
        """Test a renderer re-activates its size after another one rendered."""
        from spheretrace.camera.pinhole import Camera
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.manager import SceneManager

        scene = SceneManager()
        scene.set_camera(Camera(position=(0, 0, 0), target=(0, 0, -1), fov=60))
        small = FrameRenderer(4, 4)
        large = FrameRenderer(8, 8)
        assert small.render(scene).shape == (4 * 4 * 4,)
        assert large.render(scene).shape == (8 * 8 * 4,)

    def test_render_animation_ticks_between_frames(self):
        """Test the generator yields frames and advances the orbit after each."""
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.planets import create_planets_scene

        scene, orbit = create_planets_scene()
        renderer = FrameRenderer(16, 12)
        seen = []

        frames = list(
            renderer.render_animation(
                scene, orbit, 3, callback=lambda i, frame: seen.append(i)
            )
        )

        assert len(frames) == 3
        assert seen == [0, 1, 2]
        assert orbit.tick_count == 3
        assert renderer.frame_count == 3

    def test_render_is_deterministic(self):
        """Test rendering the same scene twice gives identical bytes."""
        from spheretrace.core.renderer import FrameRenderer
        from spheretrace.scene.planets import create_planets_scene

        scene, _ = create_planets_scene()
        renderer = FrameRenderer(32, 24)
        first = renderer.render(scene)
        second = renderer.render(scene)
        assert np.array_equal(first, second)

    def test_save_image(self, tmp_path):
        """Test save_image writes a PNG of the right size."""
        from PIL import Image as PILImage

        from spheretrace.core.renderer import FrameRenderer

        renderer = FrameRenderer(2, 2)
        renderer.render(_two_by_two_scene((0, 10, 0)))
        path = tmp_path / "frame.png"
        renderer.save_image(str(path))

        with PILImage.open(path) as img:
            assert img.size == (2, 2)
            # Flipped: top row of the file is the top of the viewport
            assert img.getpixel((0, 0))[0] > img.getpixel((0, 1))[0]
