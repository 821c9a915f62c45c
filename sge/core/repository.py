# sge/core/repository.py

from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from bson import ObjectId
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from sge.core.utils import utcnow

ModelType = TypeVar("ModelType", bound=BaseModel)  # Documento como armazenado (ex: ClientInDB)


class BaseRepository(Generic[ModelType]):
    """Repositório base para MongoDB com Motor e Pydantic.

    Subclasses definem `model` e `collection_name`. Os métodos `*_for_company`
    sempre filtram pelo tenant (`company_id`), e são os que as rotas usam.
    """

    model: Type[ModelType]
    collection_name: str

    def __init__(self, db: AsyncIOMotorDatabase):
        if not getattr(self, 'collection_name', None):
            raise AttributeError("Repository subclass must define a 'collection_name'")
        if not hasattr(self, 'model') or not issubclass(self.model, BaseModel):
            raise AttributeError("Repository subclass must define a Pydantic 'model'")
        self.db = db
        self.collection: AsyncIOMotorCollection = db[self.collection_name]

    @staticmethod
    def _to_objectid(id_str: Any) -> Optional[ObjectId]:
        """Converte input para ObjectId de forma segura, retornando None se inválido."""
        if isinstance(id_str, ObjectId):
            return id_str
        if isinstance(id_str, str) and ObjectId.is_valid(id_str):
            return ObjectId(id_str)
        return None

    def _handle_db_exception(self, e: Exception, operation: str, doc_id: Any = None, query: Optional[Dict] = None):
        """Loga e levanta exceções de banco de dados padronizadas."""
        context = f"op='{operation}' coll='{self.collection_name}'"
        if doc_id:
            context += f" id='{doc_id}'"
        if query:
            context += f" query='{str(query)[:100]}'"
        log_msg = f"DB Error during {context}: {e}"

        if isinstance(e, DuplicateKeyError):
            dup_key_info = e.details.get('keyValue', {}) if e.details else {}
            logger.error(f"{log_msg} - Duplicate Key: {dup_key_info}")
            raise ValueError(f"Duplicate key error: Field(s) {list(dup_key_info.keys())} must be unique.") from e
        logger.exception(log_msg)
        raise RuntimeError(f"Database error during operation: {operation}") from e

    def _prepare_data_for_db(self, data: Dict) -> Dict:
        """Converte ids em string para ObjectId nos campos `*_id`. Subclasses podem sobrescrever."""
        prepared = {}
        for key, value in data.items():
            if key.endswith("_id") and isinstance(value, str):
                prepared[key] = self._to_objectid(value) or value
            else:
                prepared[key] = value
        return prepared

    def _validate(self, document: Optional[Dict]) -> Optional[ModelType]:
        return self.model.model_validate(document) if document else None

    async def get_by_id(self, id: str | ObjectId) -> Optional[ModelType]:
        """Busca um documento pelo seu _id."""
        obj_id = self._to_objectid(id)
        if not obj_id:
            return None
        return await self.get_by({"_id": obj_id})

    async def get_by(self, query: Dict[str, Any]) -> Optional[ModelType]:
        """Busca o PRIMEIRO documento que corresponde a um critério."""
        try:
            document = await self.collection.find_one(query)
        except Exception as e:
            self._handle_db_exception(e, "get_by", query=query)
        return self._validate(document)

    async def list_by(
        self,
        query: Optional[Dict[str, Any]] = None,
        skip: int = 0,
        limit: int = 0,
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> List[ModelType]:
        """Lista documentos com base em critérios, paginação e ordenação (limit=0 = sem limite)."""
        try:
            cursor = self.collection.find(query or {})
            if sort:
                cursor = cursor.sort(sort)
            if skip > 0:
                cursor = cursor.skip(skip)
            if limit > 0:
                cursor = cursor.limit(limit)
            documents = await cursor.to_list(length=limit if limit > 0 else None)
        except Exception as e:
            self._handle_db_exception(e, "list_by", query=query)
        return [self.model.model_validate(doc) for doc in documents]

    async def create(self, data_in: BaseModel | Dict) -> ModelType:
        """Cria um novo documento e devolve o modelo validado."""
        if isinstance(data_in, BaseModel):
            create_data = data_in.model_dump(by_alias=False)
        else:
            create_data = dict(data_in)

        create_data = self._prepare_data_for_db(create_data)
        now = utcnow()
        create_data.setdefault("created_at", now)
        create_data.setdefault("updated_at", now)
        create_data.pop("id", None)
        if create_data.get("_id") is None:
            create_data.pop("_id", None)

        try:
            result: InsertOneResult = await self.collection.insert_one(create_data)
        except Exception as e:
            self._handle_db_exception(e, "create")

        created = await self.get_by_id(result.inserted_id)
        if created is None:
            logger.critical(f"CRITICAL: Failed to retrieve document immediately after insertion! ID: {result.inserted_id}, Collection: {self.collection_name}")
            raise RuntimeError("Failed to retrieve document after creation.")
        return created

    async def _update_where(self, query: Dict[str, Any], data_in: BaseModel | Dict) -> Optional[ModelType]:
        if isinstance(data_in, BaseModel):
            update_data = data_in.model_dump(exclude_unset=True, by_alias=False)
        else:
            update_data = dict(data_in)

        update_data = self._prepare_data_for_db(update_data)
        for field in ("_id", "id", "created_at", "company_id"):
            update_data.pop(field, None)

        if not update_data:
            return await self.get_by(query)

        update_data["updated_at"] = utcnow()
        try:
            result: UpdateResult = await self.collection.update_one(query, {"$set": update_data})
        except Exception as e:
            self._handle_db_exception(e, "update", query=query)

        if result.matched_count == 0:
            logger.warning(f"Document not found for update: {query}, Collection: {self.collection_name}")
            return None
        return await self.get_by(query)

    async def update(self, id: str | ObjectId, data_in: BaseModel | Dict) -> Optional[ModelType]:
        """Atualiza um documento existente usando $set."""
        obj_id = self._to_objectid(id)
        if not obj_id:
            return None
        return await self._update_where({"_id": obj_id}, data_in)

    async def delete(self, id: str | ObjectId) -> bool:
        """Deleta um documento pelo ID."""
        obj_id = self._to_objectid(id)
        if not obj_id:
            return False
        return await self._delete_where({"_id": obj_id})

    async def _delete_where(self, query: Dict[str, Any]) -> bool:
        try:
            result: DeleteResult = await self.collection.delete_one(query)
        except Exception as e:
            self._handle_db_exception(e, "delete", query=query)
        deleted = result.deleted_count > 0
        if deleted:
            logger.info(f"Document deleted: {query.get('_id')}, Collection: {self.collection_name}")
        else:
            logger.warning(f"Document not found for deletion: {query.get('_id')}, Collection: {self.collection_name}")
        return deleted

    async def delete_many(self, query: Dict[str, Any]) -> int:
        try:
            result: DeleteResult = await self.collection.delete_many(query)
        except Exception as e:
            self._handle_db_exception(e, "delete_many", query=query)
        return result.deleted_count

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        """Conta documentos que correspondem a um critério."""
        try:
            return await self.collection.count_documents(query or {})
        except Exception as e:
            self._handle_db_exception(e, "count", query=query)

    # --- Tenant-scoped helpers ---

    def _company_query(self, company_id: ObjectId, query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        scoped = dict(query or {})
        scoped["company_id"] = company_id
        return scoped

    async def get_for_company(self, id: str | ObjectId, company_id: ObjectId) -> Optional[ModelType]:
        obj_id = self._to_objectid(id)
        if not obj_id:
            return None
        return await self.get_by({"_id": obj_id, "company_id": company_id})

    async def list_for_company(
        self,
        company_id: ObjectId,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: int = 0,
    ) -> List[ModelType]:
        return await self.list_by(self._company_query(company_id, query), sort=sort, limit=limit)

    async def update_for_company(self, id: str | ObjectId, company_id: ObjectId, data_in: BaseModel | Dict) -> Optional[ModelType]:
        obj_id = self._to_objectid(id)
        if not obj_id:
            return None
        return await self._update_where({"_id": obj_id, "company_id": company_id}, data_in)

    async def delete_for_company(self, id: str | ObjectId, company_id: ObjectId) -> bool:
        obj_id = self._to_objectid(id)
        if not obj_id:
            return False
        return await self._delete_where({"_id": obj_id, "company_id": company_id})

    async def count_for_company(self, company_id: ObjectId, query: Optional[Dict[str, Any]] = None) -> int:
        return await self.count(self._company_query(company_id, query))

    async def create_indexes(self):
        """Índice padrão por tenant. Subclasses acrescentam os seus."""
        try:
            await self.collection.create_index("company_id")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")
