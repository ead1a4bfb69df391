"""
FHE Productivity Contract Server
Serves the productivity contract ABI over HTTP and runs the decryption oracle
"""

import logging
import traceback
from datetime import datetime
from typing import List, Optional

import uvicorn
from fastapi import BackgroundTasks, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import APP_CONFIG, CONTRACT_CONFIG, DEV_ACCOUNTS, SERVER_CONFIG
from ..contract import ContractError, NotManager, ProductivityContract, SignerRequired
from ..contract import UnknownCategory, UnknownMetric, UnknownRequest
from ..utils.helpers import bytes_to_str, setup_logging, str_to_bytes

logger = logging.getLogger(__name__)


# Models
class DataWriteRequest(BaseModel):
    data: str = Field('', description="base64 encoded bytes")


class MetricSubmissionRequest(BaseModel):
    output: str
    hours: str
    tasks: str
    work_type: Optional[str] = None


class DecryptionCallbackRequest(BaseModel):
    request_id: int
    cleartexts: List[int]
    proof: str


def build_contract() -> ProductivityContract:
    """Contract backed by a freshly keyed TenSEAL library"""
    from ..fhe.library import FHELibrary

    return ProductivityContract(FHELibrary(), manager=CONTRACT_CONFIG['manager'])


def _contract_error(e: Exception) -> HTTPException:
    if isinstance(e, SignerRequired):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, NotManager):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, (UnknownMetric, UnknownRequest, UnknownCategory)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def create_app(contract: Optional[ProductivityContract] = None) -> FastAPI:
    app = FastAPI(title="FHE Productivity Contract", version=APP_CONFIG['version'])
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True,
                       allow_methods=["*"], allow_headers=["*"])
    app.state.contract = contract

    def get_contract() -> ProductivityContract:
        if app.state.contract is None:
            app.state.contract = build_contract()
            logger.info("✅ Productivity contract deployed")
        return app.state.contract

    def call(fn, *args, **kwargs):
        """Run a contract call, mapping reverts onto HTTP errors"""
        try:
            return fn(*args, **kwargs)
        except HTTPException:
            raise
        except ContractError as e:
            logger.warning(f"❌ Reverted: {type(e).__name__}: {e}")
            raise _contract_error(e)
        except ValueError as e:
            logger.warning(f"❌ Validation error: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"❌ Contract call failed: {e}\n{traceback.format_exc()}")
            raise HTTPException(status_code=500, detail=str(e))

    def fulfil(request_id: int):
        contract = get_contract()
        try:
            contract.fhe.oracle.fulfil(request_id)
        except Exception as e:
            logger.error(f"❌ Oracle fulfilment failed for request {request_id}: {e}")

    @app.get("/")
    def root():
        return {
            "service": APP_CONFIG['app_name'],
            "version": APP_CONFIG['version'],
            "manager": get_contract().manager
        }

    @app.get("/health")
    def health():
        contract = get_contract()
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "metrics": contract.metric_count,
            "pending_decryptions": len(contract.fhe.oracle.pending())
        }

    @app.get("/accounts")
    def accounts():
        return {"accounts": DEV_ACCOUNTS, "manager": get_contract().manager}

    @app.get("/is_available")
    def is_available():
        return {"available": get_contract().is_available()}

    @app.get("/data/{key}")
    def get_data(key: str):
        return {"key": key, "data": bytes_to_str(get_contract().get_data(key))}

    @app.put("/data/{key}")
    def set_data(key: str, request: DataWriteRequest, x_account: Optional[str] = Header(None)):
        data = call(str_to_bytes, request.data)
        call(get_contract().set_data, x_account, key, data)
        return {"success": True, "key": key}

    @app.get("/fhe/public_context")
    def public_context():
        return {"context": bytes_to_str(get_contract().fhe.public_context())}

    @app.post("/metrics")
    def submit_metric(request: MetricSubmissionRequest, x_account: Optional[str] = Header(None)):
        contract = get_contract()
        ciphertexts = [call(str_to_bytes, v) for v in (request.output, request.hours, request.tasks)]
        metric_id = call(contract.submit_encrypted_metric, x_account, *ciphertexts,
                         work_type=request.work_type)
        return {"success": True, "metric_id": metric_id}

    @app.get("/metrics/{metric_id}")
    def get_metric(metric_id: int):
        metric = call(get_contract().get_encrypted_metric, metric_id)
        return {
            "id": metric.id,
            "output": metric.output,
            "hours": metric.hours,
            "tasks": metric.tasks,
            "submitted_at": metric.submitted_at,
            "submitter": metric.submitter
        }

    @app.post("/metrics/{metric_id}/decrypt")
    def request_metric_decryption(metric_id: int, background_tasks: BackgroundTasks,
                                  x_account: Optional[str] = Header(None)):
        if not x_account:
            raise HTTPException(status_code=401, detail="Transaction requires a signer")
        request_id = call(get_contract().request_metric_decryption, metric_id)
        background_tasks.add_task(fulfil, request_id)
        return {"success": True, "request_id": request_id}

    @app.get("/metrics/{metric_id}/revealed")
    def get_revealed_metric(metric_id: int):
        return call(get_contract().get_revealed_metric, metric_id).to_dict()

    @app.post("/metrics/decryption_callback")
    def metric_decryption_callback(request: DecryptionCallbackRequest):
        call(get_contract().handle_metric_decryption, request.request_id, request.cleartexts, request.proof)
        return {"success": True}

    @app.get("/categories/{category}/counter")
    def get_encrypted_task_counter(category: str):
        return {"category": category, "handle": call(get_contract().get_encrypted_task_counter, category)}

    @app.post("/categories/{category}/decrypt")
    def request_category_decryption(category: str, background_tasks: BackgroundTasks,
                                    x_account: Optional[str] = Header(None)):
        request_id = call(get_contract().request_category_decryption, x_account, category)
        background_tasks.add_task(fulfil, request_id)
        return {"success": True, "request_id": request_id}

    @app.get("/categories/{category}/revealed")
    def get_revealed_category_count(category: str):
        tasks = call(get_contract().get_revealed_category_count, category)
        return {"category": category, "revealed": tasks is not None, "tasks": tasks}

    @app.post("/categories/decryption_callback")
    def category_decryption_callback(request: DecryptionCallbackRequest):
        call(get_contract().handle_category_decryption, request.request_id, request.cleartexts, request.proof)
        return {"success": True}

    @app.get("/events")
    def events(since: int = 0):
        return {"events": get_contract().events[since:]}

    return app


app = create_app()


def main():
    setup_logging()
    logger.info("🚀 Starting FHE Productivity Contract Server...")
    uvicorn.run(app, host=SERVER_CONFIG['host'], port=SERVER_CONFIG['port'])


if __name__ == "__main__":
    main()
