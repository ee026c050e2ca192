import unittest

from catan_layout import generate
from catan_layout.assign.seeding import SEED_BITS, board_signature, derive_seed, generation_seed
from catan_layout.domain.board import BoardSpec


class SeedingTests(unittest.TestCase):
    def test_requested_seed_is_preserved(self) -> None:
        self.assertEqual(generation_seed(17), 17)

    def test_fresh_seed_fits_range(self) -> None:
        seed = generation_seed(None)
        self.assertGreaterEqual(seed, 0)
        self.assertLess(seed, 2**SEED_BITS)

    def test_derived_seeds_are_stable_and_distinct(self) -> None:
        self.assertEqual(derive_seed(5, "dice"), derive_seed(5, "dice"))
        self.assertNotEqual(derive_seed(5, "dice"), derive_seed(5, "resources"))
        self.assertNotEqual(derive_seed(5, "dice"), derive_seed(6, "dice"))

    def test_signature_ignores_seed_and_radius(self) -> None:
        first = generate(BoardSpec(hex_radius=50), seed=1)
        second = generate(BoardSpec(hex_radius=20), seed=2)
        # table-order search lays out the same board regardless of seed
        self.assertEqual(board_signature(first), board_signature(second))
        self.assertEqual(len(board_signature(first)), 16)


if __name__ == "__main__":
    unittest.main()
