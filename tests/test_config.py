import tempfile
import unittest
from pathlib import Path

from table_reservations import PROFILES, VenueConfig, get_profile, load_venue_config


class TestVenueConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = VenueConfig()
        self.assertEqual((config.open_hour, config.close_hour), (7, 22))
        self.assertIn("T1", config.tables)
        self.assertIsNone(config.holiday_country)

    def test_profiles(self) -> None:
        self.assertEqual(get_profile("late-opening").open_hour, 8)
        self.assertEqual(get_profile("late-opening").close_hour, 22)
        self.assertIs(get_profile("default"), PROFILES["default"])
        with self.assertRaises(ValueError):
            get_profile("brunch")

    def test_invalid_bounds_rejected(self) -> None:
        with self.assertRaises(ValueError):
            VenueConfig(open_hour=23, close_hour=7)
        with self.assertRaises(ValueError):
            VenueConfig(close_hour=24)
        with self.assertRaises(ValueError):
            VenueConfig(tables=())
        with self.assertRaises(ValueError):
            VenueConfig(tables=("T1", "T1"))

    def test_load_from_yaml_overrides_profile(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "venue.yaml"
            path.write_text(
                "profile: late-opening\nclose_hour: 21\ntables: [Patio1, Patio2, Bar]\nholiday_country: us\n",
                encoding="utf-8",
            )

            config = load_venue_config(path)

            self.assertEqual(config.open_hour, 8)
            self.assertEqual(config.close_hour, 21)
            self.assertEqual(config.tables, ("Patio1", "Patio2", "Bar"))
            self.assertEqual(config.holiday_country, "US")

    def test_empty_file_gives_default_profile(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "venue.yaml"
            path.write_text("", encoding="utf-8")
            self.assertEqual(load_venue_config(path), VenueConfig())

    def test_bad_files_raise_value_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "missing.yaml"
            with self.assertRaises(ValueError):
                load_venue_config(missing)

            not_mapping = Path(temp_dir) / "list.yaml"
            not_mapping.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_venue_config(not_mapping)

            bad_hour = Path(temp_dir) / "hour.yaml"
            bad_hour.write_text("open_hour: early\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_venue_config(bad_hour)

            bad_country = Path(temp_dir) / "country.yaml"
            bad_country.write_text("holiday_country: ZZ\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_venue_config(bad_country)

    def test_unsupported_holiday_country_rejected_at_construction(self) -> None:
        with self.assertRaises(ValueError):
            VenueConfig(holiday_country="ZZ")
        self.assertEqual(VenueConfig(holiday_country="US").holiday_country, "US")

    def test_hours_label_shows_last_bookable_minute(self) -> None:
        self.assertEqual(VenueConfig().hours_label(), "07:00-22:59")
        self.assertEqual(get_profile("late-opening").hours_label(), "08:00-22:59")


if __name__ == "__main__":
    unittest.main()
