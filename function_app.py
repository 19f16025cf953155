import azure.functions as func
import logging

from timeapi import get_time

app = func.FunctionApp()


@app.function_name(name="data")
@app.route(route="data", methods=["get", "options"], auth_level=func.AuthLevel.ANONYMOUS)
def data(req: func.HttpRequest) -> func.HttpResponse:
    logging.info('Data function called.')
    return get_time(req)


@app.function_name(name="HealthCheck")
@app.route(route="healthcheck", methods=["get"], auth_level=func.AuthLevel.ANONYMOUS)
def healthcheck(req: func.HttpRequest) -> func.HttpResponse:
    logging.info('HealthCheck function called.')
    return func.HttpResponse("OK", status_code=200)
