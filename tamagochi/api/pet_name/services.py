# tamagochi/api/pet_name/services.py
import logging

from tamagochi.services.storage_service import StorageError, TamagochiStore


class PetNameService:
    """세션 이름 등록/해제와 공유 목록 갱신을 연결하는 서비스."""
    def __init__(self, store: TamagochiStore, remove_on_clear: bool = True):
        self.store = store
        self.remove_on_clear = remove_on_clear
        logging.info("PetNameService initialized with dependencies.")

    def register(self, name: str) -> str:
        """
        이름을 공유 목록에 등록(upsert)합니다.
        저장 실패 시 StorageError가 그대로 전파되며, 이 경우 세션 쿠키도 설정하지 않아야 합니다.
        """
        self.store.upsert(name)
        return name

    def clear(self, name) -> bool:
        """
        세션 해제 시 호출됩니다. 설정에 따라 공유 목록에서도 기록을 지웁니다.
        삭제 실패는 기록만 남기고 세션 해제 자체는 계속 진행합니다.
        """
        if not name or not self.remove_on_clear:
            return False
        try:
            self.store.remove(name)
            return True
        except StorageError as e:
            logging.error(f"Failed to remove tamagochi record for {name!r}: {e}", exc_info=True)
            return False
