"""
Tests for defibrillator episodes and asthma inhalers.

Covers:
- Episode fields wrapped in one container element
- Episode summaries and the non-negative duration
- Inhaler alerts needing days and times
- Inhaler start date being required
"""

from __future__ import annotations

from collections.abc import Callable
from xml.etree import ElementTree as ET

import pytest
from pydantic import ValidationError

from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateTime
from healthitems.domain.errors import ItemParseError
from healthitems.domain.measurements import StructuredMeasurement
from healthitems.items.medications import Alert, AsthmaInhaler
from healthitems.items.vitals import DefibrillatorEpisode, DefibrillatorEpisodeField

Parse = Callable[[str], ET.Element]


class TestDefibrillatorEpisode:
    def test_fields_are_wrapped(self) -> None:
        episode = DefibrillatorEpisode(
            episode_type=CodableValue(text="VF"),
            duration_in_seconds=12,
            episode_fields=[
                DefibrillatorEpisodeField(
                    name=CodableValue(text="Shock energy"),
                    value=StructuredMeasurement(value=35, units=CodableValue(text="J")),
                )
            ],
        )

        element = episode.write_xml()

        assert element.findtext("episode-fields/episode-field/name/text") == "Shock energy"
        assert DefibrillatorEpisode.parse_xml(element) == episode
        assert str(episode) == "VF, 12 seconds"
        assert str(episode.episode_fields[0]) == "Shock energy: 35 J"

    def test_empty_fields_are_omitted(self) -> None:
        element = DefibrillatorEpisode(episode_type=CodableValue(text="VT")).write_xml()

        assert element.find("episode-fields") is None

    def test_duration_must_not_be_negative(self) -> None:
        with pytest.raises(ValidationError):
            DefibrillatorEpisode(duration_in_seconds=-1)


class TestAsthmaInhaler:
    def test_from_xml(self, parse: Parse) -> None:
        element = parse(
            """
            <asthma-inhaler>
              <drug><text>Fluticasone</text></drug>
              <purpose>prevention</purpose>
              <start-date><descriptive>last winter</descriptive></start-date>
              <max-daily-doses>4</max-daily-doses>
              <can-alert>true</can-alert>
              <alert>
                <dow>2</dow>
                <dow>4</dow>
                <time><h>8</h><m>0</m></time>
              </alert>
            </asthma-inhaler>
            """
        )

        inhaler = AsthmaInhaler.parse_xml(element)

        assert str(inhaler) == "Fluticasone"
        assert inhaler.alert[0].dow == [2, 4]
        assert str(inhaler.alert[0]) == "Mon, Wed at 08:00"

    def test_start_date_is_required(self, parse: Parse) -> None:
        with pytest.raises(ItemParseError, match="start-date"):
            AsthmaInhaler.parse_xml(
                parse("<asthma-inhaler><drug><text>Albuterol</text></drug></asthma-inhaler>")
            )

    @pytest.mark.parametrize("dow", [0, 8])
    def test_day_of_week_bounds(self, dow: int) -> None:
        with pytest.raises(ValidationError):
            Alert(dow=[dow], time=[ApproximateTime(h=8, m=0)])

    def test_alert_needs_days_and_times(self) -> None:
        with pytest.raises(ValidationError):
            Alert(dow=[1], time=[])
        with pytest.raises(ValidationError):
            Alert(dow=[], time=[ApproximateTime(h=8, m=0)])
