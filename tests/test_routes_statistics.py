"""
Tests for statistics API routes
"""

import pytest


class TestDescriptiveRoute:
    """Test POST /api/statistics/descriptive"""

    def test_descriptive(self, client):
        response = client.post('/api/statistics/descriptive', json={'values': [2, 4, 4, 4, 5, 5, 7, 9]})
        assert response.status_code == 200
        data = response.get_json()
        assert data['n'] == 8
        assert data['mean'] == 5.0
        assert data['median'] == 4.5

    def test_empty_values(self, client):
        data = client.post('/api/statistics/descriptive', json={'values': []}).get_json()
        assert data['n'] == 0

    @pytest.mark.parametrize("payload", [
        {},
        {'values': 'abc'},
        {'values': [1, 'two', 3]},
        {'values': [1, True]},
    ])
    def test_invalid_values(self, client, payload):
        response = client.post('/api/statistics/descriptive', json=payload)
        assert response.status_code == 400
        assert "'values'" in response.get_json()['error']

    def test_non_json_body(self, client):
        response = client.post('/api/statistics/descriptive', data='1,2,3', content_type='text/plain')
        assert response.status_code == 400


class TestConfidenceIntervalRoute:
    """Test POST /api/statistics/confidence-interval"""

    def test_default_level(self, client):
        data = client.post('/api/statistics/confidence-interval', json={'values': [120, 124, 128]}).get_json()
        assert data['estimate'] == 124.0
        assert data['confidence_level'] == 0.95
        assert data['lower'] < 124 < data['upper']

    def test_custom_level(self, client):
        data = client.post(
            '/api/statistics/confidence-interval',
            json={'values': [120, 124, 128], 'confidence_level': 0.9},
        ).get_json()
        assert data['confidence_level'] == 0.9

    @pytest.mark.parametrize("level", [0, 1, 1.5, -0.2])
    def test_invalid_level(self, client, level):
        response = client.post(
            '/api/statistics/confidence-interval',
            json={'values': [120, 124, 128], 'confidence_level': level},
        )
        assert response.status_code == 400


class TestRegressionRoute:
    """Test POST /api/statistics/regression"""

    def test_regression(self, client):
        data = client.post('/api/statistics/regression', json={'x': [0, 1, 2, 3], 'y': [1, 3, 5, 7]}).get_json()
        assert data['slope'] == pytest.approx(2.0)
        assert data['intercept'] == pytest.approx(1.0)
        assert len(data['predictions']) == 4

    def test_missing_y(self, client):
        response = client.post('/api/statistics/regression', json={'x': [0, 1, 2]})
        assert response.status_code == 400


class TestCompareRoute:
    """Test POST /api/statistics/compare"""

    def test_compare(self, client):
        data = client.post(
            '/api/statistics/compare',
            json={'period1': [140, 142, 138], 'period2': [130, 132, 128]},
        ).get_json()
        assert data['mean_difference'] == pytest.approx(-10.0)
        assert data['effect_size_interpretation'] == 'large'
        assert data['t_test']['significant'] is True


class TestOutliersRoute:
    """Test POST /api/statistics/outliers"""

    def test_outliers(self, client):
        data = client.post('/api/statistics/outliers', json={'values': [1, 2, 3, 4, 100]}).get_json()
        assert data['outliers'] == [100]
        assert data['outlier_indices'] == [4]

    def test_small_sample_unbounded(self, client):
        data = client.post('/api/statistics/outliers', json={'values': [1, 2, 100]}).get_json()
        assert data['outliers'] == []
        assert data['lower_bound'] is None
        assert data['upper_bound'] is None

    def test_invalid_k(self, client):
        response = client.post('/api/statistics/outliers', json={'values': [1, 2, 3, 4], 'k': 'wide'})
        assert response.status_code == 400


class TestMovingAverageRoute:
    """Test POST /api/statistics/moving-average"""

    def test_smoothing(self, client):
        data = client.post(
            '/api/statistics/moving-average',
            json={'values': [1, 2, 3, 4, 5], 'window': 3, 'alpha': 0.5},
        ).get_json()
        assert data['moving_average'] == [2.0, 3.0, 4.0]
        assert data['exponential_moving_average'][:2] == [1, 1.5]

    def test_window_required(self, client):
        response = client.post('/api/statistics/moving-average', json={'values': [1, 2, 3]})
        assert response.status_code == 400
        assert "'window'" in response.get_json()['error']

    def test_invalid_alpha(self, client):
        response = client.post(
            '/api/statistics/moving-average',
            json={'values': [1, 2, 3], 'window': 2, 'alpha': 0},
        )
        assert response.status_code == 400
