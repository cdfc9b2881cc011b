import unittest

from r12b import layout


class LayoutTestCase(unittest.TestCase):
    """
    Tests for the block layout constants and extraction table
    """

    def test_constants(self):
        self.assertEqual(layout.BYTES_PER_BLOCK, 36)
        self.assertEqual(layout.PIXELS_PER_BLOCK, 8)
        self.assertEqual(layout.SAMPLE_MAX, 4095)
        self.assertEqual(layout.block_row_bytes(16), 72)
        self.assertEqual(layout.packet_size(16, 3), 216)

    def test_pixel_format(self):
        fmt = layout.PIXEL_FORMAT
        self.assertEqual(fmt.name, "gbrp12le")
        self.assertEqual(fmt.plane_order, ("g", "b", "r"))
        self.assertEqual(fmt.bits_per_raw_sample, 12)
        self.assertEqual(fmt.bytes_per_sample, 2)
        self.assertEqual(fmt.byteorder, "little")

    def test_table_shape(self):
        self.assertEqual(len(layout.EXTRACTION_TABLE), 3)
        for samples in layout.EXTRACTION_TABLE:
            self.assertEqual(len(samples), layout.PIXELS_PER_BLOCK)

    def test_samples_span_12_bits(self):
        """
        The two fields of each sample cover bits 0-11 with no gap or overlap
        """
        for samples in layout.EXTRACTION_TABLE:
            for sample in samples:
                masks = [
                    ((1 << f.width) - 1) << f.shift for f in (sample.low, sample.high)
                ]
                self.assertEqual(masks[0] & masks[1], 0, sample)
                self.assertEqual(masks[0] | masks[1], 0xFFF, sample)

    def test_block_bits_used_once(self):
        """
        Every bit of the 36 byte block feeds exactly one sample
        """
        part_masks = {layout.FULL: 0xFF, layout.LOW: 0x0F, layout.HIGH: 0xF0}
        used = [0] * layout.BYTES_PER_BLOCK
        for samples in layout.EXTRACTION_TABLE:
            for sample in samples:
                for field in sample:
                    self.assertLessEqual(field.word, 8)
                    self.assertLessEqual(field.byte, 3)
                    mask = part_masks[field.part]
                    self.assertEqual(used[field.index] & mask, 0, field)
                    used[field.index] |= mask
        self.assertEqual(used, [0xFF] * layout.BYTES_PER_BLOCK)

    def test_field_extract(self):
        src = bytes([0x00, 0xA5, 0x00, 0x00])
        self.assertEqual(layout.Field(0, 1, layout.FULL, 4).extract(src), 0xA50)
        self.assertEqual(layout.Field(0, 1, layout.LOW, 8).extract(src), 0x500)
        self.assertEqual(layout.Field(0, 1, layout.HIGH, 0).extract(src), 0xA)
        # block offset within a larger buffer
        self.assertEqual(layout.Field(0, 0, layout.FULL, 0).extract(src, 1), 0xA5)


if __name__ == "__main__":
    unittest.main()
