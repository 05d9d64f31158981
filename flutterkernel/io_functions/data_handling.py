import importlib.util
import logging
import os
import sys

import h5py
import numpy as np

# types which h5py stores directly as a dataset
numeric_types = (np.ndarray, np.number, np.bool_, bool, int, float, complex)


def open_hdf5(filename):
    return h5py.File(filename, 'w')


def write_hdf5(fid, dic, path=''):
    recursively_save_dict_to_hdf5(fid, dic, path)


def close_hdf5(fid):
    fid.close()


def load_hdf5(filename):
    return h5py.File(filename, 'r')


def dump_hdf5(filename, dic):
    with open_hdf5(filename) as fid:
        recursively_save_dict_to_hdf5(fid, dic)


def recursively_save_dict_to_hdf5(fid, dic, path=''):
    """
    Save a nested dictionary to an HDF5 file, each sub-dictionary becomes a group. Keys may be integers, for example
    the number of a response. Items which are None are not saved, so that optional results may remain undefined.
    """
    for key, item in dic.items():
        name = '{}/{}'.format(path, key)
        if item is None:
            continue
        elif isinstance(item, dict):
            recursively_save_dict_to_hdf5(fid, item, name)
        elif isinstance(item, numeric_types):
            fid.create_dataset(name, data=item)
        elif isinstance(item, str) or (isinstance(item, list) and all([isinstance(x, str) for x in item])):
            fid.create_dataset(name, data=item)
            # mark strings so that they are decoded again when loading
            fid[name].attrs['is_string'] = True
        elif isinstance(item, list):
            fid.create_dataset(name, data=np.array(item))
        else:
            raise ValueError('Saving of {} with data type {} is not implemented.'.format(name, type(item)))


def load_hdf5_dict(hdf5_object):
    """
    Load an HDF5 group into a (nested) dictionary with numpy arrays and strings.
    """
    new_dict = {}
    for key, item in hdf5_object.items():
        if isinstance(item, h5py.Group):
            new_dict[key] = load_hdf5_dict(item)
        elif item.attrs.get('is_string', False):
            new_dict[key] = item.asstr()[()]
        else:
            new_dict[key] = item[()]
    return new_dict


def load_hdf5_responses(job_name, path_output):
    filename = os.path.join(path_output, 'response_' + job_name + '.hdf5')
    logging.info('--> Loading response(s) from {}'.format(filename))
    with load_hdf5(filename) as fid:
        # the groups are named by the number of the response
        responses = [load_hdf5_dict(fid[key]) for key in sorted(fid.keys(), key=int)]
    return responses


def load_jcl(job_name, path_input, jcl):
    if jcl is None:
        filename = os.path.join(path_input, job_name + '.py')
        logging.info('--> Reading parameters from JCL {}'.format(filename))
        # The JCL is a python module, import it by its filename.
        spec = importlib.util.spec_from_file_location('jcl', filename)
        jcl_module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(jcl_module)
        jcl = jcl_module.jcl()
    missing = [attribute for attribute in ['general', 'structure', 'aero', 'parameters', 'flutter']
               if not hasattr(jcl, attribute)]
    if missing:
        logging.critical('JCL appears to be incomplete, missing: {}. Exit.'.format(', '.join(missing)))
        sys.exit()
    return jcl


def check_path(path):
    path = str(path)
    os.makedirs(path, exist_ok=True)
    if not os.access(path, os.W_OK):
        logging.critical('Path {} not writable. Exit.'.format(path))
        sys.exit()
    # make sure the path ends with a separator
    return os.path.join(path, '')
