"""
目标配置管理服务
"""
import os
from typing import List, Tuple
import logging


DEFAULT_PORT = 443


def normalize_target(target: str) -> str:
    """
    规范化目标：不含冒号时追加默认端口

    Args:
        target: host 或 host:port

    Returns:
        str: host:port
    """
    if ':' not in target:
        return f"{target}:{DEFAULT_PORT}"
    return target


def split_target(address: str) -> Tuple[str, int]:
    """
    按最后一个冒号拆分主机与端口

    Args:
        address: 规范化后的 host:port，IPv6 地址可写作 [::1]:443

    Returns:
        Tuple[str, int]: 主机与端口

    Raises:
        ValueError: 端口不是合法整数
    """
    host, _, port_str = address.rpartition(':')
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]

    if not port_str.isdigit():
        raise ValueError(f"无效端口: {address}")

    port = int(port_str)
    if not 0 < port < 65536:
        raise ValueError(f"端口超出范围: {address}")

    return host, port


class TargetConfigManager:
    """目标配置管理器"""

    def __init__(self, env_var_name: str = "DOMAINS"):
        """
        初始化目标配置管理器

        Args:
            env_var_name: 环境变量名称，默认为"DOMAINS"
        """
        self.env_var_name = env_var_name
        self.logger = logging.getLogger(__name__)

    def get_targets(self) -> List[str]:
        """
        从环境变量获取目标列表（逗号分隔），保持原始顺序

        Returns:
            List[str]: 目标列表
        """
        targets_str = os.getenv(self.env_var_name, "")

        if not targets_str.strip():
            self.logger.warning(f"环境变量 {self.env_var_name} 为空")
            return []

        targets = self.parse_targets(targets_str)
        self.logger.info(f"成功加载 {len(targets)} 个目标")
        return targets

    def parse_targets(self, targets_str: str) -> List[str]:
        """
        解析逗号分隔的目标列表，跳过空项

        Args:
            targets_str: 原始字符串

        Returns:
            List[str]: 目标列表
        """
        return [target.strip() for target in targets_str.split(',') if target.strip()]
