"""Registry Handlers - CRUD endpoints for clients, pets, staff and catalog."""

from fastapi import APIRouter, Body, Depends

from petshop.contracts.agendamento import Agendamento
from petshop.contracts.catalogo import (
    Produto,
    ProdutoCreate,
    ProdutoUpdate,
    Servico,
    ServicoCreate,
    ServicoUpdate,
)
from petshop.contracts.clientes import (
    Cliente,
    ClienteCreate,
    ClienteUpdate,
    Pet,
    PetCreate,
    PetUpdate,
)
from petshop.contracts.funcionario import Funcionario, FuncionarioCreate, FuncionarioUpdate
from petshop.core.auth import Role
from petshop.core.dependencies import AppDependencies
from petshop.handlers.deps import get_current_user, get_deps, require_role

authenticated = [Depends(get_current_user)]
manager_only = [Depends(require_role(Role.GERENTE))]
admin_only = [Depends(require_role(Role.ADMIN))]

clientes_router = APIRouter(prefix="/clientes", tags=["clientes"], dependencies=authenticated)
pets_router = APIRouter(prefix="/pets", tags=["pets"], dependencies=authenticated)
servicos_router = APIRouter(prefix="/servicos", tags=["servicos"], dependencies=authenticated)
produtos_router = APIRouter(prefix="/produtos", tags=["produtos"], dependencies=authenticated)
funcionarios_router = APIRouter(
    prefix="/funcionarios", tags=["funcionarios"], dependencies=authenticated
)


# Clientes

@clientes_router.get("", response_model=list[Cliente])
async def list_clientes(deps: AppDependencies = Depends(get_deps)) -> list[Cliente]:
    return await deps.clients.list()


@clientes_router.get("/{cliente_id}", response_model=Cliente)
async def get_cliente(cliente_id: str, deps: AppDependencies = Depends(get_deps)) -> Cliente:
    return await deps.clients.require(cliente_id)


@clientes_router.get("/{cliente_id}/pets", response_model=list[Pet])
async def list_pets_do_cliente(
    cliente_id: str, deps: AppDependencies = Depends(get_deps)
) -> list[Pet]:
    await deps.clients.require(cliente_id)
    return await deps.pets.list_by_client(cliente_id)


@clientes_router.get("/{cliente_id}/agendamentos", response_model=list[Agendamento])
async def list_agendamentos_do_cliente(
    cliente_id: str, deps: AppDependencies = Depends(get_deps)
) -> list[Agendamento]:
    await deps.clients.require(cliente_id)
    return await deps.appointments.list_by_client(cliente_id)


@clientes_router.post("", response_model=Cliente, status_code=201)
async def create_cliente(
    payload: ClienteCreate, deps: AppDependencies = Depends(get_deps)
) -> Cliente:
    return await deps.clients.create(payload)


@clientes_router.patch("/{cliente_id}", response_model=Cliente)
async def update_cliente(
    cliente_id: str, payload: ClienteUpdate, deps: AppDependencies = Depends(get_deps)
) -> Cliente:
    return await deps.clients.update(cliente_id, payload)


@clientes_router.delete("/{cliente_id}", status_code=204)
async def delete_cliente(cliente_id: str, deps: AppDependencies = Depends(get_deps)) -> None:
    await deps.clients.delete(cliente_id)


# Pets

@pets_router.get("", response_model=list[Pet])
async def list_pets(deps: AppDependencies = Depends(get_deps)) -> list[Pet]:
    return await deps.pets.list()


@pets_router.get("/{pet_id}", response_model=Pet)
async def get_pet(pet_id: str, deps: AppDependencies = Depends(get_deps)) -> Pet:
    return await deps.pets.require(pet_id)


@pets_router.post("", response_model=Pet, status_code=201)
async def create_pet(payload: PetCreate, deps: AppDependencies = Depends(get_deps)) -> Pet:
    return await deps.pets.create(payload)


@pets_router.patch("/{pet_id}", response_model=Pet)
async def update_pet(
    pet_id: str, payload: PetUpdate, deps: AppDependencies = Depends(get_deps)
) -> Pet:
    return await deps.pets.update(pet_id, payload)


@pets_router.delete("/{pet_id}", status_code=204)
async def delete_pet(pet_id: str, deps: AppDependencies = Depends(get_deps)) -> None:
    await deps.pets.delete(pet_id)


# Serviços

@servicos_router.get("", response_model=list[Servico])
async def list_servicos(deps: AppDependencies = Depends(get_deps)) -> list[Servico]:
    return await deps.services.list()


@servicos_router.get("/{servico_id}", response_model=Servico)
async def get_servico(servico_id: str, deps: AppDependencies = Depends(get_deps)) -> Servico:
    return await deps.services.require(servico_id)


@servicos_router.post("", response_model=Servico, status_code=201, dependencies=manager_only)
async def create_servico(
    payload: ServicoCreate, deps: AppDependencies = Depends(get_deps)
) -> Servico:
    return await deps.services.create(payload)


@servicos_router.patch("/{servico_id}", response_model=Servico, dependencies=manager_only)
async def update_servico(
    servico_id: str, payload: ServicoUpdate, deps: AppDependencies = Depends(get_deps)
) -> Servico:
    return await deps.services.update(servico_id, payload)


@servicos_router.delete("/{servico_id}", status_code=204, dependencies=manager_only)
async def delete_servico(servico_id: str, deps: AppDependencies = Depends(get_deps)) -> None:
    await deps.services.delete(servico_id)


# Produtos

@produtos_router.get("", response_model=list[Produto])
async def list_produtos(deps: AppDependencies = Depends(get_deps)) -> list[Produto]:
    return await deps.products.list()


@produtos_router.get("/{produto_id}", response_model=Produto)
async def get_produto(produto_id: str, deps: AppDependencies = Depends(get_deps)) -> Produto:
    return await deps.products.require(produto_id)


@produtos_router.post("", response_model=Produto, status_code=201, dependencies=manager_only)
async def create_produto(
    payload: ProdutoCreate, deps: AppDependencies = Depends(get_deps)
) -> Produto:
    return await deps.products.create(payload)


@produtos_router.patch("/{produto_id}", response_model=Produto, dependencies=manager_only)
async def update_produto(
    produto_id: str, payload: ProdutoUpdate, deps: AppDependencies = Depends(get_deps)
) -> Produto:
    return await deps.products.update(produto_id, payload)


@produtos_router.delete("/{produto_id}", status_code=204, dependencies=manager_only)
async def delete_produto(produto_id: str, deps: AppDependencies = Depends(get_deps)) -> None:
    await deps.products.delete(produto_id)


# Funcionários

@funcionarios_router.get("", response_model=list[Funcionario])
async def list_funcionarios(deps: AppDependencies = Depends(get_deps)) -> list[Funcionario]:
    return await deps.employees.list()


@funcionarios_router.get("/{funcionario_id}", response_model=Funcionario)
async def get_funcionario(
    funcionario_id: str, deps: AppDependencies = Depends(get_deps)
) -> Funcionario:
    return await deps.employees.require(funcionario_id)


@funcionarios_router.post(
    "", response_model=Funcionario, status_code=201, dependencies=admin_only
)
async def create_funcionario(
    payload: FuncionarioCreate, deps: AppDependencies = Depends(get_deps)
) -> Funcionario:
    return await deps.employees.create(payload)


@funcionarios_router.patch(
    "/{funcionario_id}", response_model=Funcionario, dependencies=admin_only
)
async def update_funcionario(
    funcionario_id: str,
    payload: FuncionarioUpdate,
    deps: AppDependencies = Depends(get_deps),
) -> Funcionario:
    return await deps.employees.update(funcionario_id, payload)


@funcionarios_router.patch(
    "/{funcionario_id}/ativo", response_model=Funcionario, dependencies=admin_only
)
async def set_funcionario_ativo(
    funcionario_id: str,
    ativo: bool = Body(..., embed=True),
    deps: AppDependencies = Depends(get_deps),
) -> Funcionario:
    return await deps.employees.set_active(funcionario_id, ativo)


@funcionarios_router.delete("/{funcionario_id}", status_code=204, dependencies=admin_only)
async def delete_funcionario(
    funcionario_id: str, deps: AppDependencies = Depends(get_deps)
) -> None:
    await deps.employees.delete(funcionario_id)
