from mu.score import Score
from mu.settings import TagSettings
from mu.statistics import Statistics

from datetime import date, datetime, timedelta, timezone
import json
import math
import pytest

NOW = datetime(2024, 3, 1, 12, 0, 0, 0, timezone.utc)


class TestStatistics:
    def test_new(self):
        settings = TagSettings(desired_retention_rate=0.9)
        statistics = Statistics.new(settings)

        assert statistics.reviews == []
        assert statistics.activity == {}
        assert statistics.adaptive_retention_rate == 0.9
        assert statistics.familiarity == 1.0
        assert math.isnan(statistics.retention_rate())

    def test_review_above_desired(self):
        settings = TagSettings()
        statistics = Statistics.new(settings)

        statistics.review(Score.Okay, settings, NOW)

        # 0.95 * 0.82 + 0.05 * 1.0
        assert statistics.adaptive_retention_rate == pytest.approx(0.829)
        assert statistics.familiarity == pytest.approx(1.1)
        assert statistics.reviews == [Score.Okay]

    def test_review_below_desired(self):
        settings = TagSettings()
        statistics = Statistics.new(settings)

        statistics.review(Score.Fail, settings, NOW)

        assert statistics.adaptive_retention_rate == pytest.approx(0.779)
        assert statistics.familiarity == pytest.approx(0.9)

    def test_familiarity_bounds(self):
        settings = TagSettings()

        statistics = Statistics.new(settings)
        for _ in range(30):
            statistics.review(Score.Easy, settings, NOW)
        assert statistics.familiarity == pytest.approx(settings.max_familiarity)

        for _ in range(100):
            statistics.review(Score.Fail, settings, NOW)
        assert statistics.familiarity == pytest.approx(settings.min_familiarity)

        statistics = Statistics(familiarity=1.95, adaptive_retention_rate=1.0)
        statistics.review(Score.Good, settings, NOW)
        assert statistics.familiarity == settings.max_familiarity

    def test_retention_rate(self):
        settings = TagSettings()
        statistics = Statistics.new(settings)

        for score in (Score.Fail, Score.Hard, Score.Okay, Score.Easy):
            statistics.review(score, settings, NOW)

        assert statistics.retention_rate() == 0.75

    def test_activity(self):
        settings = TagSettings()
        statistics = Statistics.new(settings)
        late = datetime(2024, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-2)))

        statistics.review(Score.Okay, settings, NOW)
        statistics.review(Score.Okay, settings, NOW + timedelta(hours=1))
        # counted on the UTC day
        statistics.review(Score.Okay, settings, late)

        assert statistics.activity == {date(2024, 3, 1): 2, date(2024, 3, 2): 1}

    def test_Statistics_json_serialize(self):
        settings = TagSettings()
        statistics = Statistics.new(settings)

        for day, score in enumerate((Score.Good, Score.Fail, Score.Hard)):
            statistics.review(score, settings, NOW + timedelta(days=day))

        with pytest.raises(TypeError):
            json.dumps(statistics.__dict__)

        copied_statistics = Statistics.from_json(statistics.to_json())
        assert copied_statistics == statistics
        assert copied_statistics.to_dict() == statistics.to_dict()
