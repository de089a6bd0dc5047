"""
TLS客户端服务（基于 pyOpenSSL）
"""
import ipaddress
import selectors
import socket
import time
from typing import List, Optional
import logging

import idna
from cryptography import x509
from cryptography.x509.oid import NameOID
from OpenSSL import SSL

from ..interfaces import TLSClientInterface, TLSConnectionInterface
from ..models import CertificateView
from .target_config import split_target


logger = logging.getLogger(__name__)


def to_certificate_view(cert: x509.Certificate) -> CertificateView:
    """
    将 cryptography 证书转换为只读视图

    Args:
        cert: cryptography 证书对象

    Returns:
        CertificateView: 证书视图
    """
    organizations = tuple(
        str(attr.value) for attr in cert.subject.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)
    )
    names = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    common_name = str(names[0].value) if names else ""

    return CertificateView(
        organizations=organizations,
        common_name=common_name,
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc
    )


class PyOpenSSLConnection(TLSConnectionInterface):
    """已完成握手的TLS连接"""

    def __init__(self, connection: SSL.Connection, sock: socket.socket):
        self.connection = connection
        self.sock = sock
        self.closed = False

    def peer_certificates(self) -> List[CertificateView]:
        chain = self.connection.get_peer_cert_chain() or []
        return [to_certificate_view(cert.to_cryptography()) for cert in chain]

    def close(self):
        if self.closed:
            return
        self.closed = True

        try:
            self.connection.shutdown()
        except (SSL.Error, OSError) as e:
            logger.debug(f"TLS关闭通知发送失败: {type(e).__name__}: {str(e)}")
        finally:
            self.sock.close()


class PyOpenSSLClient(TLSClientInterface):
    """TLS客户端实现"""

    def create_context(self) -> SSL.Context:
        """
        创建SSL上下文

        只检查证书有效期，不做信任链与主机名验证，
        自签名或根证书不受信任的服务也必须能被检查。
        """
        context = SSL.Context(SSL.TLS_CLIENT_METHOD)
        context.set_verify(SSL.VERIFY_NONE)
        return context

    def dial(self, address: str, timeout: float) -> PyOpenSSLConnection:
        """
        建立TLS连接并完成握手

        Args:
            address: host:port
            timeout: 连接与握手的超时时间（秒）

        Returns:
            PyOpenSSLConnection: TLS连接

        Raises:
            ValueError: 端口无效
            OSError: DNS解析失败、连接超时或被拒绝
            SSL.Error: TLS握手失败
        """
        host, port = split_target(address)
        deadline = time.monotonic() + timeout

        sock = socket.create_connection((host, port), timeout=timeout)
        try:
            connection = SSL.Connection(self.create_context(), sock)
            connection.set_connect_state()

            server_name = self._server_name(host)
            if server_name:
                connection.set_tlsext_host_name(server_name)

            self._handshake(connection, sock, deadline)
        except BaseException:
            sock.close()
            raise

        return PyOpenSSLConnection(connection, sock)

    def _handshake(self, connection: SSL.Connection, sock: socket.socket, deadline: float):
        """
        在截止时间前完成握手

        使用 selectors（epoll/poll），文件描述符不受 select() 的 1024 上限约束。
        """
        with selectors.DefaultSelector() as selector:
            while True:
                try:
                    connection.do_handshake()
                    return
                except (SSL.WantReadError, SSL.WantWriteError) as e:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise socket.timeout("TLS握手超时")

                    events = selectors.EVENT_READ if isinstance(e, SSL.WantReadError) else selectors.EVENT_WRITE
                    selector.register(sock, events)
                    try:
                        ready = selector.select(remaining)
                    finally:
                        selector.unregister(sock)

                    if not ready:
                        raise socket.timeout("TLS握手超时")

    def _server_name(self, host: str) -> Optional[bytes]:
        """
        计算SNI名称，IP地址不发送SNI

        Args:
            host: 主机名

        Returns:
            Optional[bytes]: IDNA编码的主机名
        """
        try:
            ipaddress.ip_address(host)
            return None
        except ValueError:
            pass

        try:
            return idna.encode(host, uts46=True)
        except idna.IDNAError as e:
            logger.debug(f"主机名 {host} 无法进行IDNA编码，不发送SNI: {str(e)}")
            return None
