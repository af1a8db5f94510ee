"""
错误类型

- ValidationFailed: 远程调用前的本地校验失败，无需补偿
- RemoteCallError: 数据库 / 对象存储调用失败，携带底层错误信息
- SagaStepFailed: 多步写入中途失败（已执行补偿），对调用方表现为 RemoteCallError
"""

from typing import Optional


class AdminCoreError(Exception):
    """所有业务错误的基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(AdminCoreError):
    """本地校验失败"""


class RemoteCallError(AdminCoreError):
    """远程调用失败"""


class NotFoundError(RemoteCallError):
    """目标记录不存在"""


class StorageError(RemoteCallError):
    """对象存储调用失败"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SagaStepFailed(RemoteCallError):
    """Saga 步骤失败（补偿已执行）"""

    def __init__(self, saga: str, step: str, cause: BaseException):
        super().__init__(str(cause) or type(cause).__name__)
        self.saga = saga
        self.step = step
        self.cause = cause


class UnexpectedError(AdminCoreError):
    """未预期的运行时错误（在契约边界统一包装）"""
