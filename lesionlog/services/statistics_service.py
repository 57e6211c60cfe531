# lesionlog/services/statistics_service.py
from datetime import datetime, timedelta
import pandas as pd
from ..repositories.result_repository import ResultRepository
from ..utils.exceptions import ValidationError
from ..utils.logger import setup_logger
from ..utils.params import day_bounds

HIGH_CONFIDENCE_THRESHOLD = 90
RECENT_WINDOW = timedelta(days=7)
TOP_USERS_LIMIT = 10

# period -> (look-back window, bucket keys)
PERIODS = {
    'daily': (timedelta(days=30), ['year', 'month', 'day']),
    'weekly': (timedelta(days=84), ['year', 'week']),
    'monthly': (timedelta(days=365), ['year', 'month']),
    'yearly': (timedelta(days=5 * 365), ['year']),
}

def _number(value):
    return float(value) if value is not None else 0

class StatisticsService:
    def __init__(self):
        self.repository = ResultRepository()
        self.logger = setup_logger()

    def get_statistics(self, start_date=None, end_date=None, now=None):
        """Service: Overview, confidence distribution, label breakdown and top users

        With start_date (and optionally end_date) every figure is restricted to that day range;
        an end_date alone is rejected.
        """
        now = now or datetime.utcnow()
        start, end = day_bounds(start_date, end_date) if start_date or end_date else (None, None)

        total = self.repository.count(start, end)
        high = self.repository.count(start, end, min_confidence_exclusive=HIGH_CONFIDENCE_THRESHOLD)
        recent = self.repository.count(start, end, created_since=now - RECENT_WINDOW)
        count, avg_confidence, min_confidence, max_confidence = self.repository.confidence_summary(start, end)

        statistics = {
            "overview": {
                "totalPredictions": total,
                "highConfidencePredictions": high,
                "recentPredictions": recent,
                "highConfidencePercentage": round(high / total * 100, 2) if total > 0 else 0
            },
            "confidenceStats": {
                "avgConfidence": _number(avg_confidence),
                "maxConfidence": _number(max_confidence),
                "minConfidence": _number(min_confidence),
                "totalPredictions": count or 0
            },
            "predictionBreakdown": [
                {
                    "prediction": row.prediction,
                    "count": row.result_count,
                    "avgConfidence": _number(row.avg_confidence),
                    "maxConfidence": _number(row.max_confidence),
                    "minConfidence": _number(row.min_confidence),
                    "uniqueUserCount": row.unique_users
                }
                for row in self.repository.group_by_prediction(start, end)
            ],
            "topUsers": [
                {
                    "userId": row.id,
                    "username": row.username,
                    "email": row.email,
                    "role": row.role,
                    "count": row.result_count,
                    "avgConfidence": _number(row.avg_confidence)
                }
                for row in self.repository.top_users(TOP_USERS_LIMIT, start, end)
            ]
        }
        self.logger.info(f"Service: Statistics computed over {total} results")
        return statistics

    def get_time_based_statistics(self, period, now=None):
        """Service: Bucketed trend for daily, weekly, monthly or yearly periods"""
        if period not in PERIODS:
            raise ValidationError("Invalid period. Use: daily, weekly, monthly, or yearly")

        now = now or datetime.utcnow()
        window, keys = PERIODS[period]
        since = now - window

        rows = self.repository.rows_since(since)
        frame = pd.DataFrame(
            [tuple(row) for row in rows],
            columns=['created_at', 'confidence', 'user_id', 'prediction']
        )

        data = {
            "period": period,
            "dateRange": {"from": since.isoformat(), "to": now.isoformat()},
            "summary": {"totalCount": 0, "avgConfidence": 0, "uniqueUserCount": 0},
            "timeSeriesData": [],
            "predictionBreakdown": []
        }
        if frame.empty:
            return data

        data["summary"] = {
            "totalCount": int(len(frame)),
            "avgConfidence": round(float(frame['confidence'].mean()), 2),
            "uniqueUserCount": int(frame['user_id'].nunique())
        }
        data["timeSeriesData"] = self._buckets(frame, keys)
        data["predictionBreakdown"] = self._label_breakdown(frame)
        self.logger.info(f"Service: {period} statistics computed over {len(frame)} results")
        return data

    @staticmethod
    def _buckets(frame, keys):
        stamps = pd.to_datetime(frame['created_at'])
        frame = frame.assign(
            year=stamps.dt.year,
            month=stamps.dt.month,
            day=stamps.dt.day,
            # Sunday-based week of year, 0..53
            week=stamps.dt.strftime('%U').astype(int)
        )
        grouped = frame.groupby(keys, sort=True)
        aggregates = grouped.agg(
            count=('confidence', 'size'),
            avgConfidence=('confidence', 'mean'),
            minConfidence=('confidence', 'min'),
            maxConfidence=('confidence', 'max'),
            uniqueUserCount=('user_id', 'nunique')
        )
        labels = grouped['prediction'].agg(list)

        buckets = []
        for (key, row), predictions in zip(aggregates.iterrows(), labels):
            key = key if isinstance(key, tuple) else (key,)
            buckets.append({
                "bucket": {name: int(value) for name, value in zip(keys, key)},
                "count": int(row['count']),
                "avgConfidence": round(float(row['avgConfidence']), 2),
                "minConfidence": float(row['minConfidence']),
                "maxConfidence": float(row['maxConfidence']),
                "uniqueUserCount": int(row['uniqueUserCount']),
                "predictions": list(predictions)
            })
        return buckets

    @staticmethod
    def _label_breakdown(frame):
        aggregates = frame.groupby('prediction').agg(
            count=('confidence', 'size'),
            avgConfidence=('confidence', 'mean')
        )
        aggregates = aggregates.sort_values('count', ascending=False, kind='stable')
        return [
            {
                "prediction": prediction,
                "count": int(row['count']),
                "avgConfidence": round(float(row['avgConfidence']), 2)
            }
            for prediction, row in aggregates.iterrows()
        ]
