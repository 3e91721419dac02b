"""测试版本号比较工具"""

import pytest

from cms_health.utils.versioning import is_valid_version, parse_version, version_at_least


class TestVersionComparison:
    """测试版本比较"""

    @pytest.mark.parametrize('current, minimum, expected', [
        ('8.2.12', '7.4', True),
        ('7.4', '7.4', True),
        ('7.4.0', '7.4', True),
        ('7.3.33', '7.4', False),
        ('7.10', '7.4', True),
        ('6.9', '6.9', True),
        ('6.8.3', '6.9', False),
        ('6.9.1', '6.9', True),
    ])
    def test_version_at_least(self, current, minimum, expected):
        """测试 >= 比较按数字分段进行"""
        assert version_at_least(current, minimum) is expected

    def test_distribution_suffix_ignored(self):
        """测试发行版后缀被忽略"""
        assert str(parse_version('8.1.2-1ubuntu2.14')) == '8.1.2'
        assert version_at_least('8.1.2-1ubuntu2.14', '7.4') is True

    def test_invalid_version(self):
        """测试无法识别的版本号"""
        with pytest.raises(ValueError, match="无法识别的版本号"):
            parse_version('unknown')

        assert is_valid_version('unknown') is False
        assert is_valid_version(7.4) is False
        assert is_valid_version('7.4') is True
